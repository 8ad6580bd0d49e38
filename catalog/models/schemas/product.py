# models/schemas/product.py
from typing import Dict, List, Optional

from pydantic import Field

from .base import CamelModel, TimestampModel
from .review import Review


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    brand: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    category: Optional[str] = None


class ProductCreate(ProductBase):
    pass


class ProductRecord(ProductBase):
    """Every persisted product satisfies this, including the uploaded image URL."""

    image_url: str = Field(..., min_length=1)


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    brand: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None


class Product(ProductRecord, TimestampModel):
    reviews: List[Review] = Field(default_factory=list)


class ProductPage(CamelModel):
    links: Dict[str, str] = Field(default_factory=dict)
    total: int
    products: List[Product]
