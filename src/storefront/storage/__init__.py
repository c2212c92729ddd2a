from storefront.settings import Settings
from storefront.storage.fake_adapter import FakeImageStorage
from storefront.storage.port import ImageStorage, StorageError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

__all__ = ["ImageStorage", "StorageError", "build_image_storage"]


def build_image_storage(settings: Settings) -> ImageStorage:
    if settings.cloudinary_url:
        from storefront.storage.cloudinary_adapter import CloudinaryStorage

        return CloudinaryStorage(settings.cloudinary_url)

    logger.warning("image_storage_fake", reason="CLOUDINARY_URL not set")
    return FakeImageStorage()
