# app/api/routes/ads.py
from fastapi import APIRouter, Depends

from app.api.deps import get_ad_service, parse_id
from app.schemas.ad import AdIn, AdCreatedResponse
from app.services.ad_service import AdService

router = APIRouter(prefix="/api/v1/ad", tags=["광고"])

@router.post("", response_model=AdCreatedResponse)
def post_ad(
    ad: AdIn,
    service: AdService = Depends(get_ad_service)
):
    """광고 생성"""
    ad_id = service.post_ad(ad)
    return AdCreatedResponse(id=ad_id)

@router.put("")
def put_ad(
    ad: AdIn,
    service: AdService = Depends(get_ad_service)
):
    """광고 수정 (작성자는 변경 불가)"""
    service.put_ad(ad)
    return {}

@router.delete("/{ad_id}")
def delete_ad(
    ad_id: str,
    service: AdService = Depends(get_ad_service)
):
    """광고 삭제 (사진은 함께 삭제되지 않음)"""
    service.delete_ad(parse_id(ad_id))
    return {}
