"""FastAPI endpoints for image uploads (product galleries and category covers).

Uploads block on the storage provider, so the handlers are plain functions
that FastAPI runs in its threadpool.
"""

from pathlib import PurePath

from fastapi import APIRouter, Depends, File, UploadFile

from storefront.api.dependencies import admin_principal, current_principal, get_image_storage
from storefront.identity.principal import Principal
from storefront.shared.errors import InvalidArgument, UpstreamError
from storefront.storage.port import ImageStorage, StorageError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MAX_FILES = 5
MAX_FILE_SIZE = 5 * 1024 * 1024

router = APIRouter(tags=["uploads"])


def _read_image(upload: UploadFile) -> bytes:
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise InvalidArgument("Only image files are allowed", field="images")

    data = upload.file.read()
    if len(data) > MAX_FILE_SIZE:
        raise InvalidArgument("File too large. Maximum size is 5MB", field="images")
    return data


def _store(storage: ImageStorage, data: bytes, upload: UploadFile, folder: str) -> dict:
    filename = upload.filename or "image"
    try:
        url = storage.store(data, filename, upload.content_type, folder)
    except StorageError as exc:
        raise UpstreamError(f"Image upload failed: {exc}") from exc

    return {
        "url": url,
        "alt": PurePath(filename).stem,
        "size": len(data),
        "mimetype": upload.content_type,
    }


@router.post("/upload/images")
def upload_images(
    images: list[UploadFile] | None = File(None),
    principal: Principal = Depends(current_principal),
    storage: ImageStorage = Depends(get_image_storage),
):
    if not images:
        raise InvalidArgument("No files uploaded", field="images")
    if len(images) > MAX_FILES:
        raise InvalidArgument(f"Too many files. Maximum is {MAX_FILES}", field="images")

    # Validate the whole batch before anything reaches storage
    payloads = [(upload, _read_image(upload)) for upload in images]
    uploaded = [_store(storage, data, upload, "products") for upload, data in payloads]

    logger.info("images_uploaded", count=len(uploaded), user_id=principal.id)
    return {"success": True, "message": "Images uploaded successfully", "data": uploaded}


@router.post("/categories/upload-image")
def upload_category_image(
    image: UploadFile = File(...),
    _: Principal = Depends(admin_principal),
    storage: ImageStorage = Depends(get_image_storage),
):
    data = _read_image(image)
    uploaded = _store(storage, data, image, "categories")
    return {"success": True, "message": "Image uploaded successfully", "data": uploaded}
