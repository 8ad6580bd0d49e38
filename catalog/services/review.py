# services/review.py
"""Reviews embedded in a product document.

Reviews have no collection of their own, so every operation first resolves
the owning product and then mutates its ``reviews`` array with a single
document-level update (``$push``, positional ``$set`` or ``$pull``).
"""

from typing import List

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError

from catalog.models.database_models import review_document
from catalog.models.schemas.review import Review, ReviewBase, ReviewCreate, ReviewUpdate
from catalog.utils.common import to_object_id, utcnow
from catalog.utils.exceptions import InternalFault, NotFound, ValidationError
from catalog.utils.logging import get_logger

from catalog.services.base import BaseService

logger = get_logger(__name__)


def review_not_found(review_id) -> str:
    return f"Review with id {review_id} not found"


class ReviewService(BaseService[Review]):
    async def list_reviews(self, product_id: str) -> List[Review]:
        oid = to_object_id(product_id, f"Product with id {product_id} not found")
        document = await self._handle_db_operation(
            lambda: self.collection.find_one({"_id": oid}, {"reviews": 1, "_id": 0})
        )
        if document is None:
            # Kept as a server fault rather than a 404 for existing clients
            raise InternalFault(f"Reviews requested for missing product {product_id}")
        return [Review.model_validate(review) for review in document.get("reviews", [])]

    async def add_review(self, product_id: str, data: ReviewCreate) -> str:
        oid = to_object_id(product_id, f"Product with id {product_id} not found")
        now = utcnow()
        review = review_document(data, now)
        result = await self._handle_db_operation(
            lambda: self.collection.update_one(
                {"_id": oid},
                {"$push": {"reviews": review}, "$set": {"updatedAt": now}},
            )
        )
        if result.matched_count == 0:
            raise InternalFault(f"Review posted for missing product {product_id}")

        logger.info(f"Added review {review['_id']} to product {oid}")
        return str(oid)

    async def _find_review(self, product_oid: ObjectId, review_oid: ObjectId, review_id: str) -> dict:
        document = await self._handle_db_operation(
            lambda: self.collection.find_one({"_id": product_oid}, {"reviews": 1, "_id": 0})
        )
        reviews = [
            review for review in (document or {}).get("reviews", [])
            if review.get("_id") == review_oid
        ]
        if not reviews:
            raise NotFound(review_not_found(review_id))
        return reviews[0]

    async def get_review(self, product_id: str, review_id: str) -> Review:
        product_oid = to_object_id(product_id, review_not_found(review_id))
        review_oid = to_object_id(review_id, review_not_found(review_id))
        return Review.model_validate(await self._find_review(product_oid, review_oid, review_id))

    async def update_review(self, product_id: str, review_id: str, data: ReviewUpdate) -> Review:
        """Merge the payload over the stored review, keeping its _id and createdAt."""
        product_oid = to_object_id(product_id, review_not_found(review_id))
        review_oid = to_object_id(review_id, review_not_found(review_id))
        current = await self._find_review(product_oid, review_oid, review_id)

        merged = dict(current)
        merged.update(data.model_dump(by_alias=True, exclude_unset=True))
        merged["_id"] = current["_id"]
        if "createdAt" in current:
            merged["createdAt"] = current["createdAt"]
        else:
            merged.pop("createdAt", None)

        try:
            ReviewBase.model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        result = await self._handle_db_operation(
            lambda: self.collection.update_one(
                {"_id": product_oid, "reviews._id": review_oid},
                {"$set": {"reviews.$": merged, "updatedAt": utcnow()}},
            )
        )
        if result.matched_count == 0:
            raise NotFound(review_not_found(review_id))

        logger.info(f"Updated review {review_oid} of product {product_oid}")
        return Review.model_validate(merged)

    async def delete_review(self, product_id: str, review_id: str) -> None:
        """Pull the review from its product.

        Only the product's existence is checked: pulling an id that is not in
        the array still succeeds.
        """
        product_oid = to_object_id(product_id, review_not_found(review_id))
        review_oid = to_object_id(review_id, review_not_found(review_id))
        result = await self._handle_db_operation(
            lambda: self.collection.update_one(
                {"_id": product_oid},
                {"$pull": {"reviews": {"_id": review_oid}}, "$set": {"updatedAt": utcnow()}},
            )
        )
        if result.matched_count == 0:
            raise NotFound(review_not_found(review_id))

        logger.info(f"Pulled review {review_oid} from product {product_oid}")
