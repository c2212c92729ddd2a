"""Cloudinary image storage.

Credentials come from a ``cloudinary://<key>:<secret>@<cloud>`` URL and are
passed on each call instead of through ``cloudinary.config``.
"""

import io
import time
from secrets import randbelow
from urllib.parse import urlparse

import cloudinary.exceptions
import cloudinary.uploader

from storefront.storage.port import ImageStorage, StorageError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# Uploaded images are capped at 800x800 and recompressed
TRANSFORMATION = [{"width": 800, "height": 800, "crop": "limit", "quality": "auto"}]


def credentials_from_url(cloudinary_url: str) -> dict:
    parsed = urlparse(cloudinary_url)
    if parsed.scheme != "cloudinary" or not parsed.hostname:
        raise ValueError("CLOUDINARY_URL must look like cloudinary://<api_key>:<api_secret>@<cloud_name>")
    return {
        "cloud_name": parsed.hostname,
        "api_key": parsed.username,
        "api_secret": parsed.password,
        "secure": True,
    }


class CloudinaryStorage(ImageStorage):
    def __init__(self, cloudinary_url: str, folder_prefix: str = "storefront") -> None:
        self.credentials = credentials_from_url(cloudinary_url)
        self.folder_prefix = folder_prefix

    def _folder(self, folder: str) -> str:
        return f"{self.folder_prefix}-{folder}"

    def store(self, data: bytes, filename: str, content_type: str, folder: str) -> str:
        public_id = f"{folder}-{int(time.time() * 1000)}-{randbelow(10**9)}"
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(data),
                folder=self._folder(folder),
                public_id=public_id,
                resource_type="image",
                transformation=TRANSFORMATION,
                **self.credentials,
            )
        except cloudinary.exceptions.Error as exc:
            logger.error("cloudinary_upload_failed", filename=filename, error=str(exc))
            raise StorageError(str(exc)) from exc

        return result["secure_url"]

    def discard(self, url: str) -> bool:
        if "cloudinary.com" not in url:
            return False

        # .../upload/v123/<folder>/<public id>.<ext>
        parts = url.split("/")
        public_id = f"{parts[-2]}/{parts[-1].rsplit('.', 1)[0]}"
        try:
            result = cloudinary.uploader.destroy(public_id, **self.credentials)
        except cloudinary.exceptions.Error as exc:
            logger.warning("cloudinary_destroy_failed", public_id=public_id, error=str(exc))
            return False
        return result.get("result") == "ok"
