"""Shape of the documents stored in the products collection.

A product document looks like::

    {
        "_id": ObjectId,
        "name": str, "description": str, "brand": str, "imageUrl": str,
        "price": float, "category": str | None,
        "reviews": [{"_id": ObjectId, "comment": str, "rate": int, "createdAt": datetime}],
        "createdAt": datetime, "updatedAt": datetime,
    }

Reviews live only inside their product; there is no reviews collection.
"""

from datetime import datetime
from typing import Optional

from bson import ObjectId

from catalog.models.schemas.product import ProductRecord
from catalog.models.schemas.review import ReviewCreate
from catalog.utils.common import utcnow


def product_document(record: ProductRecord, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    document = record.model_dump(by_alias=True)
    document.update({"reviews": [], "createdAt": now, "updatedAt": now})
    return document


def review_document(data: ReviewCreate, now: Optional[datetime] = None) -> dict:
    document = {"_id": ObjectId()}
    document.update(data.model_dump(by_alias=True))
    document["createdAt"] = now or utcnow()
    return document
