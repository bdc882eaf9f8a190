# app/services/ad_service.py
import time
import uuid
from typing import BinaryIO, Optional, Protocol

from sqlalchemy.sql import func

from app.core.errors import AdServiceError, ErrorKind
from app.core.logger import logger
from app.models.photo import Photo
from app.schemas.ad import AdIn
from app.services.processor_service import ImageProcessorClient
from app.services.storage_service import ObjectUploader
from app.services.store_service import AdStore, PhotoStore

# 업로드 시 한 번에 읽는 크기
CHUNK_SIZE = 1024 * 1024  # 1MB

# 수정 가능한 광고 필드 (user_id 는 생성 후 변경 불가)
UPDATABLE_FIELDS = {"title", "description", "price"}


def make_object_key(ad_id: int) -> str:
    """객체 키 생성: 광고 ID + 시간(ns) + 랜덤 접미사 (동시 업로드 충돌 방지)"""
    return f"{ad_id}-{time.time_ns()}-{uuid.uuid4().hex[:8]}"


class AdService(Protocol):
    """광고/사진 서비스 인터페이스"""

    def post_ad(self, ad: AdIn) -> int: ...

    def put_ad(self, ad: AdIn) -> None: ...

    def delete_ad(self, ad_id: int) -> None: ...

    def post_photo(self, ad_id: int, stream: BinaryIO,
                   request_id: Optional[str] = None,
                   content_type: Optional[str] = None) -> Photo: ...

    def delete_photo(self, ad_id: int, photo_id: int) -> None: ...


class AdManager:
    """AdService 구현 (DB + object storage + 이미지 처리 서비스)

    사진 업로드 중 부분 실패는 기본적으로 되돌리지 않는다.
    (업로드된 객체나 생성된 사진 행이 남은 채로 에러 반환)
    strict_cleanup=True 이면 남은 객체/행을 가능한 만큼 정리한다.
    """

    def __init__(
        self,
        ads: AdStore,
        photos: PhotoStore,
        uploader: ObjectUploader,
        processor: ImageProcessorClient,
        upload_timeout_s: float = 50.0,
        strict_cleanup: bool = False,
        require_price: bool = False,
    ):
        self.ads = ads
        self.photos = photos
        self.uploader = uploader
        self.processor = processor
        self.upload_timeout_s = upload_timeout_s
        self.strict_cleanup = strict_cleanup
        self.require_price = require_price

    # ===== 광고 =====

    def post_ad(self, ad: AdIn) -> int:
        logger.info(f"PostAd 요청: {ad.model_dump_json()}")

        if not ad.user_id or not ad.title or not ad.description:
            raise AdServiceError(ErrorKind.MISSING_FIELDS)
        if self.require_price and not ad.price:
            raise AdServiceError(ErrorKind.MISSING_FIELDS)

        # 클라이언트가 보낸 id 는 무시 (DB 가 부여)
        row = self.ads.create(
            user_id=ad.user_id,
            title=ad.title,
            description=ad.description,
            price=ad.price,
        )
        logger.info(f"광고 생성: id={row.id}")
        return row.id

    def put_ad(self, ad: AdIn) -> None:
        logger.info(f"PutAd 요청: {ad.model_dump_json()}")

        if not ad.id:
            raise AdServiceError(ErrorKind.MISSING_FIELDS)

        # 보낸 필드만 수정 (빈 문자열은 무시, user_id 는 제외)
        values = {
            key: value
            for key, value in ad.model_dump(exclude_unset=True, include=UPDATABLE_FIELDS).items()
            if value not in ("", None)
        }
        # 변경할 필드가 없어도 updated_at 은 갱신 (존재 여부 확인)
        values["updated_at"] = func.now()
        affected = self.ads.update_by_id(ad.id, values)
        if affected < 1:
            raise AdServiceError(ErrorKind.NOT_FOUND)

    def delete_ad(self, ad_id: int) -> None:
        logger.info(f"DeleteAd 요청: id={ad_id}")

        if self.ads.delete_by_id(ad_id) < 1:
            raise AdServiceError(ErrorKind.NOT_FOUND)

    # ===== 사진 =====

    def post_photo(self, ad_id: int, stream: BinaryIO,
                   request_id: Optional[str] = None,
                   content_type: Optional[str] = None) -> Photo:
        logger.info(f"PostPhoto 요청: ad_id={ad_id}")

        try:
            # 1. 업로드 (타임아웃 적용)
            key = make_object_key(ad_id)
            url = self.uploader.url_for(key)
            self._upload(key, stream, content_type)
        finally:
            stream.close()

        # 2. DB 저장
        try:
            photo = self.photos.create(ad_id=ad_id, url_original=url)
        except AdServiceError:
            # 업로드된 객체가 남음
            logger.error(f"사진 행 생성 실패, 객체 남음: {key}")
            if self.strict_cleanup:
                self._delete_object(key)
            raise

        # 3. 이미지 처리 요청
        try:
            status = self.processor.process(photo.id, request_id)
            if not status.ok:
                logger.error(f"이미지 처리 실패: code={status.code.value} message={status.message}")
                raise AdServiceError(
                    ErrorKind.PROCESSOR_REJECTED,
                    status.message or None,
                )
        except AdServiceError:
            # 사진 행과 객체가 남음
            if self.strict_cleanup:
                self._delete_photo_row(ad_id, photo.id)
                self._delete_object(key)
            raise

        logger.info(f"사진 등록: id={photo.id} url={url}")
        return photo

    def delete_photo(self, ad_id: int, photo_id: int) -> None:
        logger.info(f"DeletePhoto 요청: ad_id={ad_id} id={photo_id}")

        # 저장소의 객체는 삭제하지 않음
        if self.photos.delete_scoped(ad_id, photo_id) < 1:
            raise AdServiceError(ErrorKind.NOT_FOUND)

    def _upload(self, key: str, stream: BinaryIO, content_type: Optional[str]) -> None:
        deadline = time.monotonic() + self.upload_timeout_s
        with self.uploader.open(key, deadline=deadline, content_type=content_type) as writer:
            while True:
                try:
                    chunk = stream.read(CHUNK_SIZE)
                except OSError as e:
                    raise AdServiceError(ErrorKind.UPLOAD, cause=e) from e
                if not chunk:
                    break
                writer.write(chunk)

    def _delete_object(self, key: str) -> None:
        try:
            self.uploader.delete(key)
            logger.info(f"정리: 객체 삭제 {key}")
        except AdServiceError as e:
            logger.warning(f"정리 실패: 객체 {key} ({e.cause!r})")

    def _delete_photo_row(self, ad_id: int, photo_id: int) -> None:
        try:
            self.photos.delete_scoped(ad_id, photo_id)
            logger.info(f"정리: 사진 행 삭제 id={photo_id}")
        except AdServiceError as e:
            logger.warning(f"정리 실패: 사진 행 {photo_id} ({e.cause!r})")
