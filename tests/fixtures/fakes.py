"""In-memory stand-ins for the object store, the image processor and the service."""
from dataclasses import dataclass, field
from typing import Optional

from app.core.errors import AdServiceError, ErrorKind
from app.schemas.ad import AdIn
from app.services.processor_service import ProcessStatus, StatusCode
from tests.consts import TEST_BUCKET_NAME, TEST_PUBLIC_BASE_URL


class FakeWriter:
    def __init__(self, uploader: "FakeUploader", key: str, content_type: Optional[str]):
        self.uploader = uploader
        self.key = key
        self.content_type = content_type
        self.data = bytearray()
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
        else:
            self.abort()
        return False

    def write(self, chunk: bytes) -> None:
        if self.uploader.fail_on_write:
            raise AdServiceError(ErrorKind.UPLOAD, cause=OSError("connection reset"))
        self.data.extend(chunk)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.uploader.fail_on_close:
            raise AdServiceError(ErrorKind.FINALIZE, cause=OSError("finalize failed"))
        self.uploader.objects[self.key] = bytes(self.data)

    def abort(self) -> None:
        self.closed = True
        self.uploader.aborted.append(self.key)


class FakeUploader:
    def __init__(self, fail_on_write: bool = False, fail_on_close: bool = False):
        self.bucket = TEST_BUCKET_NAME
        self.fail_on_write = fail_on_write
        self.fail_on_close = fail_on_close
        self.objects: dict[str, bytes] = {}
        self.opened: list[str] = []
        self.aborted: list[str] = []
        self.deleted: list[str] = []

    def url_for(self, key: str) -> str:
        return f"{TEST_PUBLIC_BASE_URL}/{self.bucket}/{key}"

    def open(self, key, deadline=None, content_type=None) -> FakeWriter:
        self.opened.append(key)
        return FakeWriter(self, key, content_type)

    def delete(self, key: str) -> None:
        self.deleted.append(key)
        self.objects.pop(key, None)


class FakeProcessor:
    def __init__(self, status: Optional[ProcessStatus] = None, unavailable: bool = False):
        self.status = status or ProcessStatus(StatusCode.OK, "processed")
        self.unavailable = unavailable
        self.calls: list[tuple[int, Optional[str]]] = []

    def process(self, photo_id: int, request_id: Optional[str] = None) -> ProcessStatus:
        self.calls.append((photo_id, request_id))
        if self.unavailable:
            raise AdServiceError(ErrorKind.PROCESSOR_UNAVAILABLE, cause=ConnectionError("refused"))
        return self.status

    def close(self) -> None:
        pass


@dataclass
class FakePhoto:
    id: int
    ad_id: int
    url_original: str


@dataclass
class InMemoryAdService:
    """AdService with dict storage, for transport-level tests."""
    ads: dict = field(default_factory=dict)
    photos: dict = field(default_factory=dict)
    uploads: list = field(default_factory=list)
    next_id: int = 1

    def post_ad(self, ad: AdIn) -> int:
        if not ad.user_id or not ad.title or not ad.description:
            raise AdServiceError(ErrorKind.MISSING_FIELDS)
        ad_id = self.next_id
        self.next_id += 1
        self.ads[ad_id] = ad.model_copy(update={"id": ad_id})
        return ad_id

    def put_ad(self, ad: AdIn) -> None:
        if not ad.id:
            raise AdServiceError(ErrorKind.MISSING_FIELDS)
        if ad.id not in self.ads:
            raise AdServiceError(ErrorKind.NOT_FOUND)
        current = self.ads[ad.id]
        self.ads[ad.id] = current.model_copy(update={"title": ad.title or current.title})

    def delete_ad(self, ad_id: int) -> None:
        if self.ads.pop(ad_id, None) is None:
            raise AdServiceError(ErrorKind.NOT_FOUND)

    def post_photo(self, ad_id, stream, request_id=None, content_type=None):
        try:
            self.uploads.append((ad_id, stream.read(), request_id, content_type))
        finally:
            stream.close()
        photo = FakePhoto(id=self.next_id, ad_id=ad_id, url_original=f"memory://{ad_id}/{self.next_id}")
        self.next_id += 1
        self.photos[(ad_id, photo.id)] = photo
        return photo

    def delete_photo(self, ad_id: int, photo_id: int) -> None:
        if self.photos.pop((ad_id, photo_id), None) is None:
            raise AdServiceError(ErrorKind.NOT_FOUND)
