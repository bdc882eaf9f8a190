# app/schemas/photo.py
from pydantic import BaseModel

class PhotoResponse(BaseModel):
    """사진 응답"""
    id: int
    ad_id: int
    url_original: str

    class Config:
        from_attributes = True
