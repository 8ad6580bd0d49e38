from pymongo import ASCENDING, AsyncMongoClient

from catalog.config import MONGO_CONNECTION, MONGO_DB_NAME, PRODUCTS_COLLECTION
from catalog.utils.logging import get_logger

logger = get_logger(__name__)


class MongoDatabase:
    """Process-wide MongoDB handle, opened and closed by the application lifespan."""

    def __init__(self, uri: str = MONGO_CONNECTION, name: str = MONGO_DB_NAME, client=None):
        self.uri = uri
        self.name = name
        self.client = client

    async def connect(self):
        if self.client is None:
            self.client = AsyncMongoClient(self.uri)
        await self.client.admin.command("ping")
        logger.info(f"Connected to MongoDB database '{self.name}'")
        await self.ensure_indexes()

    async def ensure_indexes(self):
        await self.products.create_index([("reviews._id", ASCENDING)])

    async def close(self):
        if self.client is not None:
            await self.client.close()
            self.client = None
            logger.info("MongoDB connection closed")

    @property
    def db(self):
        if self.client is None:
            raise RuntimeError("MongoDatabase is not connected")
        return self.client[self.name]

    @property
    def products(self):
        return self.db[PRODUCTS_COLLECTION]
