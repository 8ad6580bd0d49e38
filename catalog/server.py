"""Run the catalog API with uvicorn.

Usage:
    catalog-server
    PORT=8080 MONGO_CONNECTION=mongodb://db:27017 catalog-server
"""

import uvicorn

from catalog.config import HOST, PORT


def main():
    uvicorn.run("catalog.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()
