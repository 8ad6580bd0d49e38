from typing import Optional
import time

import aiohttp
from fastapi import UploadFile

from catalog.config import (
    CLOUDINARY_API_KEY,
    CLOUDINARY_API_SECRET,
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_FOLDER,
)
from catalog.utils.common import sign_params
from catalog.utils.exceptions import MediaUploadError
from catalog.utils.logging import get_logger

logger = get_logger(__name__)


class CloudinaryService:
    """Uploads product photos to Cloudinary and returns their public URL."""

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        folder: str = CLOUDINARY_FOLDER,
    ):
        self.cloud_name = cloud_name or CLOUDINARY_CLOUD_NAME
        self.api_key = api_key or CLOUDINARY_API_KEY
        self.api_secret = api_secret or CLOUDINARY_API_SECRET
        self.folder = folder

        self.base_url = f"https://api.cloudinary.com/v1_1/{self.cloud_name}"
        self.session = None

    async def __aenter__(self):
        """Context manager entry."""
        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        if self.session and not self.session.closed:
            await self.session.close()

    def signed_params(self, timestamp: Optional[int] = None) -> dict:
        params = {"folder": self.folder, "timestamp": timestamp or int(time.time())}
        params["signature"] = sign_params(params, self.api_secret)
        params["api_key"] = self.api_key
        return params

    async def upload_image(self, image: UploadFile) -> str:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise MediaUploadError("Cloudinary credentials are not configured")

        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession()

        form = aiohttp.FormData()
        for key, value in self.signed_params().items():
            form.add_field(key, str(value))
        form.add_field(
            "file",
            await image.read(),
            filename=image.filename or "upload",
            content_type=image.content_type or "application/octet-stream",
        )

        try:
            async with self.session.post(f"{self.base_url}/image/upload", data=form) as response:
                response.raise_for_status()
                data = await response.json()
        except aiohttp.ClientError as e:
            logger.error(f"Error uploading image {image.filename}: {e}")
            raise MediaUploadError(f"Image upload failed: {e}") from e

        logger.info(f"Uploaded image {image.filename} to {data.get('secure_url')}")
        return data["secure_url"]
