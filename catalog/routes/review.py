# routes/review.py
from typing import List

from fastapi import APIRouter, Depends, status

from catalog.database.dependencies import get_review_service
from catalog.models.schemas.review import (
    Review,
    ReviewAdded,
    ReviewCreate,
    ReviewDeleted,
    ReviewUpdate,
    ReviewUpdated,
)
from catalog.services.review import ReviewService

router = APIRouter(prefix="/products/{product_id}/reviews", tags=["reviews"])


@router.get("", status_code=status.HTTP_201_CREATED, response_model=List[Review])
async def list_reviews(
    product_id: str,
    service: ReviewService = Depends(get_review_service),
):
    return await service.list_reviews(product_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ReviewAdded)
async def add_review(
    product_id: str,
    data: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
):
    """Append a review; createdAt and the review id are assigned here."""
    return ReviewAdded(review_added=await service.add_review(product_id, data))


@router.get("/{review_id}", status_code=status.HTTP_201_CREATED, response_model=Review)
async def get_review(
    product_id: str,
    review_id: str,
    service: ReviewService = Depends(get_review_service),
):
    return await service.get_review(product_id, review_id)


@router.put("/{review_id}", status_code=status.HTTP_201_CREATED, response_model=ReviewUpdated)
async def update_review(
    product_id: str,
    review_id: str,
    data: ReviewUpdate,
    service: ReviewService = Depends(get_review_service),
):
    return ReviewUpdated(data=await service.update_review(product_id, review_id, data))


@router.delete("/{review_id}", status_code=status.HTTP_201_CREATED, response_model=ReviewDeleted)
async def delete_review(
    product_id: str,
    review_id: str,
    service: ReviewService = Depends(get_review_service),
):
    await service.delete_review(product_id, review_id)
    return ReviewDeleted()
