# routes/product.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError as PydanticValidationError

from catalog.database.dependencies import get_media_service, get_product_service
from catalog.models.schemas.product import (
    Product,
    ProductCreate,
    ProductPage,
    ProductUpdate,
)
from catalog.services.media import CloudinaryService
from catalog.services.product import ProductService
from catalog.utils.exceptions import ValidationError
from catalog.utils.query import parse_query

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=str)
async def create_product(
    name: str = Form(...),
    description: str = Form(...),
    brand: str = Form(...),
    price: float = Form(...),
    category: Optional[str] = Form(None),
    image: UploadFile = File(...),
    service: ProductService = Depends(get_product_service),
    media: CloudinaryService = Depends(get_media_service),
):
    """Create a product from a multipart form; the image is uploaded first."""
    try:
        data = ProductCreate(name=name, description=description, brand=brand, price=price, category=category)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e

    image_url = await media.upload_image(image)
    return await service.create(data, image_url)


@router.get("", status_code=status.HTTP_201_CREATED, response_model=ProductPage)
async def list_products(
    request: Request,
    service: ProductService = Depends(get_product_service),
):
    """List products filtered, sorted and paginated by the query string."""
    query = parse_query(request.url.query)
    return await service.list(query, request.url.path)


@router.get("/{product_id}", status_code=status.HTTP_201_CREATED, response_model=Product)
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    return await service.get_by_id(product_id)


@router.put("/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    data: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    return await service.update_by_id(product_id, data)


@router.delete("/{product_id}", response_class=PlainTextResponse)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    deleted_id = await service.delete_by_id(product_id)
    return f"{deleted_id} deleted"
