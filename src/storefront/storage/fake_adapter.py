from uuid import uuid4

from storefront.storage.port import ImageStorage, StorageError


class FakeImageStorage(ImageStorage):
    """Keeps uploads in memory and serves them from a fake CDN host."""

    def __init__(self, base_url: str = "https://images.fake.test") -> None:
        self.base_url = base_url.rstrip("/")
        self.objects: dict[str, bytes] = {}
        self.should_succeed = True

    def store(self, data: bytes, filename: str, content_type: str, folder: str) -> str:
        if not self.should_succeed:
            raise StorageError("Storage provider unavailable")

        extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        url = f"{self.base_url}/{folder}/{uuid4().hex}.{extension}"
        self.objects[url] = data
        return url

    def discard(self, url: str) -> bool:
        return self.objects.pop(url, None) is not None
