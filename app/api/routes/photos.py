# app/api/routes/photos.py
from fastapi import APIRouter, Depends, UploadFile, File

from app.api.deps import get_ad_service, get_request_id, parse_id
from app.core.errors import AdServiceError, ErrorKind
from app.schemas.photo import PhotoResponse
from app.services.ad_service import AdService

router = APIRouter(prefix="/api/v1/ad", tags=["사진"])

@router.post("/{ad_id}/photo", response_model=PhotoResponse)
def upload_photo(
    ad_id: str,
    photo: UploadFile | None = File(None),
    request_id: str | None = Depends(get_request_id),
    service: AdService = Depends(get_ad_service)
):
    """사진 업로드 → 저장소 업로드, DB 저장, 이미지 처리 요청"""
    parsed_id = parse_id(ad_id)

    # multipart 의 "photo" 필드 필수
    if photo is None:
        raise AdServiceError(ErrorKind.MISSING_FIELDS)

    created = service.post_photo(
        parsed_id,
        photo.file,
        request_id=request_id,
        content_type=photo.content_type,
    )
    return PhotoResponse.model_validate(created)

@router.delete("/{ad_id}/photo/{photo_id}")
def delete_photo(
    ad_id: str,
    photo_id: str,
    service: AdService = Depends(get_ad_service)
):
    """사진 삭제 (저장소의 원본 파일은 남음)"""
    service.delete_photo(parse_id(ad_id), parse_id(photo_id))
    return {}
