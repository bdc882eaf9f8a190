# app/schemas/ad.py
from pydantic import BaseModel, Field, AliasChoices

# DB INTEGER 범위
MAX_ID = 2**31 - 1

class AdIn(BaseModel):
    """광고 생성/수정 요청

    ``id_ad`` / ``id_user`` 이름도 받는다 (기존 클라이언트 호환).
    """
    id: int = Field(0, ge=0, le=MAX_ID, validation_alias=AliasChoices("id", "id_ad"))
    user_id: str = Field("", validation_alias=AliasChoices("user_id", "id_user"))
    title: str = ""
    description: str = ""
    price: float | None = None

class AdCreatedResponse(BaseModel):
    """광고 생성 응답"""
    id: int
