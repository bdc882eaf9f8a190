# app/api/deps.py
from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.config import settings
from app.core.errors import AdServiceError, ErrorKind
from app.database import get_db
from app.schemas.ad import MAX_ID
from app.services.ad_service import AdManager, AdService
from app.services.processor_service import ImageProcessorClient
from app.services.storage_service import ObjectUploader, make_s3_client
from app.services.store_service import AdStore, PhotoStore

# ===== 프로세스 단위로 공유하는 클라이언트 =====

@lru_cache
def get_uploader() -> ObjectUploader:
    """S3 업로더 (프로세스당 1개)"""
    return ObjectUploader(
        make_s3_client(settings),
        bucket=settings.s3_bucket_name,
        public_base_url=settings.storage_public_base_url,
    )

@lru_cache
def get_processor() -> ImageProcessorClient:
    """이미지 처리 서비스 클라이언트 (프로세스당 1개)"""
    return ImageProcessorClient(
        settings.image_processor_url,
        timeout_s=settings.processor_timeout_seconds,
    )

# ==========================================

def get_ad_service(
    db: Session = Depends(get_db),
    uploader: ObjectUploader = Depends(get_uploader),
    processor: ImageProcessorClient = Depends(get_processor),
) -> AdService:
    """요청마다 DB 세션을 묶은 서비스 생성"""
    return AdManager(
        ads=AdStore(db),
        photos=PhotoStore(db),
        uploader=uploader,
        processor=processor,
        upload_timeout_s=settings.upload_timeout_seconds,
        strict_cleanup=settings.strict_cleanup,
        require_price=settings.require_price,
    )

def get_request_id(request: Request) -> str | None:
    """로깅 미들웨어가 부여한 요청 ID"""
    return getattr(request.state, "request_id", None)

def parse_id(value: str) -> int:
    """경로 변수 → 1..MAX_ID 정수 (아니면 BAD_ROUTING)"""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise AdServiceError(ErrorKind.BAD_ROUTING)
    if parsed <= 0 or parsed > MAX_ID:
        raise AdServiceError(ErrorKind.BAD_ROUTING)
    return parsed
