# models/schemas/review.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel, DocumentModel, ObjectIdStr


class ReviewBase(CamelModel):
    comment: str = Field(..., min_length=1, examples=["Works as advertised"])
    rate: int = Field(..., ge=1, le=5, examples=[5])


class ReviewCreate(ReviewBase):
    """Review fields accepted from clients; id and createdAt are assigned on insert."""


class ReviewUpdate(CamelModel):
    comment: Optional[str] = Field(default=None, min_length=1)
    rate: Optional[int] = Field(default=None, ge=1, le=5)


class Review(ReviewBase, DocumentModel):
    created_at: Optional[datetime] = None


class ReviewAdded(CamelModel):
    success: bool = True
    review_added: ObjectIdStr


class ReviewUpdated(CamelModel):
    success: bool = True
    data: Review


class ReviewDeleted(CamelModel):
    success: bool = True
    data: str = "Review deleted"
