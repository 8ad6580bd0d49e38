# services/product.py
from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument

from catalog.models.database_models import product_document
from catalog.models.schemas.product import (
    Product,
    ProductCreate,
    ProductPage,
    ProductRecord,
    ProductUpdate,
)
from catalog.utils.common import to_object_id, utcnow
from catalog.utils.exceptions import NotFound, ValidationError
from catalog.utils.logging import get_logger
from catalog.utils.query import MongoQuery

from catalog.services.base import BaseService

logger = get_logger(__name__)

PRODUCT_NOT_FOUND = "Product Not Found"


class ProductService(BaseService[Product]):
    async def create(self, data: ProductCreate, image_url: str) -> str:
        try:
            record = ProductRecord(**data.model_dump(), image_url=image_url)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        result = await self._handle_db_operation(
            lambda: self.collection.insert_one(product_document(record))
        )
        logger.info(f"Created product {result.inserted_id}")
        return str(result.inserted_id)

    async def list(self, query: MongoQuery, url: str = "/products") -> ProductPage:
        total = await self._handle_db_operation(
            lambda: self.collection.count_documents(query.criteria)
        )

        cursor = self.collection.find(
            query.criteria, sort=query.sort, skip=query.skip, limit=query.limit
        )
        documents = await self._handle_db_operation(lambda: cursor.to_list(length=None))

        return ProductPage(
            links=query.links(url, total),
            total=total,
            products=[Product.model_validate(document) for document in documents],
        )

    async def get_by_id(self, product_id: str) -> Product:
        oid = to_object_id(product_id, PRODUCT_NOT_FOUND)
        document = await self._handle_db_operation(
            lambda: self.collection.find_one({"_id": oid})
        )
        if document is None:
            raise NotFound(PRODUCT_NOT_FOUND)
        return Product.model_validate(document)

    async def update_by_id(self, product_id: str, data: ProductUpdate) -> Product:
        """Merge-patch the product; only fields sent by the client are overwritten."""
        current = await self.get_by_id(product_id)

        patch = data.model_dump(exclude_unset=True)
        merged = current.model_dump(include=set(ProductRecord.model_fields))
        merged.update(patch)
        try:
            record = ProductRecord(**merged)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        changes = record.model_dump(by_alias=True, include=set(patch))
        changes["updatedAt"] = utcnow()
        document = await self._handle_db_operation(
            lambda: self.collection.find_one_and_update(
                {"_id": to_object_id(current.id, PRODUCT_NOT_FOUND)},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        )
        if document is None:
            raise NotFound(PRODUCT_NOT_FOUND)

        logger.info(f"Updated product {current.id}: {sorted(patch)}")
        return Product.model_validate(document)

    async def delete_by_id(self, product_id: str) -> str:
        oid = to_object_id(product_id, PRODUCT_NOT_FOUND)
        document = await self._handle_db_operation(
            lambda: self.collection.find_one_and_delete({"_id": oid}, projection={"_id": 1})
        )
        if document is None:
            raise NotFound(PRODUCT_NOT_FOUND)

        logger.info(f"Deleted product {oid}")
        return str(document["_id"])
