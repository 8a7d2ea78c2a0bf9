"""
Media uploader
Signed uploads to Cloudinary; returns the stored file's public URL
"""

import hashlib
import logging
import time
from typing import Optional

import httpx
from fastapi import Request
from starlette.datastructures import UploadFile

from gamification.core.config import Config
from gamification.core.errors import UploadError

logger = logging.getLogger(__name__)


class MediaUploader:
    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        base_url: str = "https://api.cloudinary.com/v1_1",
        client: Optional[httpx.AsyncClient] = None
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=60.0)

    @classmethod
    def from_config(cls, settings: Config, client: Optional[httpx.AsyncClient] = None) -> "MediaUploader":
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            base_url=settings.CLOUDINARY_BASE_URL,
            client=client,
        )

    def sign(self, params: dict) -> str:
        """sha1 over the alphabetically sorted params joined as a query string, plus the secret"""
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode()).hexdigest()

    async def upload(self, buffer: bytes, mimetype: str, folder: str, filename: str = "upload") -> dict:
        """
        Upload a file buffer

        Returns the store's response; `secure_url` is the public URL.
        Raises UploadError on transport or store errors.
        """
        params = {"folder": folder, "timestamp": int(time.time())}
        data = {**params, "api_key": self.api_key, "signature": self.sign(params)}

        try:
            response = await self.client.post(
                f"{self.base_url}/{self.cloud_name}/auto/upload",
                data=data,
                files={"file": (filename, buffer, mimetype)},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Media upload rejected (%s): %s", e.response.status_code, e.response.text)
            raise UploadError("File upload failed", details={"status": e.response.status_code})
        except httpx.HTTPError as e:
            logger.error("Media upload failed: %s", e)
            raise UploadError("File upload failed")

        return response.json()

    async def close(self):
        await self.client.aclose()


async def upload_file(uploader: MediaUploader, upload: UploadFile, folder: str) -> Optional[str]:
    """Upload a request file; the public URL, or None when the store returned none"""
    buffer = await upload.read()
    result = await uploader.upload(buffer, upload.content_type, folder, filename=upload.filename or "upload")
    return (result or {}).get("secure_url")


def get_uploader(request: Request) -> MediaUploader:
    """Uploader dependency"""
    return request.app.state.uploader
