import os

os.environ.setdefault("LOG_DIR", "")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from catalog.database.dependencies import get_media_service, get_products_collection
from catalog.main import create_app
from catalog.services.product import ProductService
from catalog.services.review import ReviewService

IMAGE_URL = "https://res.cloudinary.com/demo/image/upload/products/photo.jpg"


class FakeMediaService:
    url = IMAGE_URL

    def __init__(self):
        self.uploads = []

    async def upload_image(self, image):
        self.uploads.append((image.filename, await image.read()))
        return self.url


@pytest.fixture()
def collection():
    return AsyncMongoMockClient()["catalog_test"]["products"]


@pytest.fixture()
def media():
    return FakeMediaService()


@pytest.fixture()
def app(collection, media):
    app = create_app()
    app.dependency_overrides[get_products_collection] = lambda: collection
    app.dependency_overrides[get_media_service] = lambda: media
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def product_service(collection):
    return ProductService(collection)


@pytest.fixture()
def review_service(collection):
    return ReviewService(collection)


@pytest.fixture()
def make_product(client):
    def _make_product(**overrides):
        defaults = {
            "name": "Trail Runner",
            "description": "Lightweight running shoe",
            "brand": "Acme",
            "price": "89.9",
            "category": "shoes",
        }
        defaults.update(overrides)
        response = client.post(
            "/products",
            data=defaults,
            files={"image": ("photo.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make_product


@pytest.fixture()
def make_review(client):
    """Post a review and return its generated id."""

    def _make_review(product_id, **overrides):
        defaults = {"comment": "great", "rate": 5}
        defaults.update(overrides)
        response = client.post(f"/products/{product_id}/reviews", json=defaults)
        assert response.status_code == 201, response.text
        reviews = client.get(f"/products/{product_id}/reviews").json()
        return reviews[-1]["_id"]

    return _make_review
