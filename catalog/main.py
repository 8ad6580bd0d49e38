from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.routing import APIRoute

from catalog.config import CORS_ORIGINS, GZIP_MINIMUM_SIZE
from catalog.database.database import MongoDatabase
from catalog.routes import product, review
from catalog.utils.exceptions import register_exception_handlers
from catalog.utils.logging import get_logger

logger = get_logger(__name__)


def log_endpoints(app: FastAPI):
    for route in app.routes:
        if isinstance(route, APIRoute):
            logger.info(f"{','.join(sorted(route.methods)):<8} {route.path}")


def create_app(database: Optional[MongoDatabase] = None) -> FastAPI:
    database = database or MongoDatabase()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.connect()
        log_endpoints(app)
        yield
        await database.close()

    app = FastAPI(title="Product Catalog API", lifespan=lifespan)
    app.state.database = database

    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(product.router)
    app.include_router(review.router)
    register_exception_handlers(app)
    return app


app = create_app()
