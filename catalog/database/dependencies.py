from fastapi import Depends, Request

from catalog.services.media import CloudinaryService
from catalog.services.product import ProductService
from catalog.services.review import ReviewService


def get_products_collection(request: Request):
    return request.app.state.database.products


def get_product_service(collection=Depends(get_products_collection)) -> ProductService:
    return ProductService(collection)


def get_review_service(collection=Depends(get_products_collection)) -> ReviewService:
    return ReviewService(collection)


async def get_media_service():
    async with CloudinaryService() as service:
        yield service
