# app/models/photo.py
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base

class Photo(Base):
    """사진 모델 (생성 후 변경 불가, 삭제만 가능)"""
    __tablename__ = "t_photo"

    # 기본 필드
    id = Column(Integer, primary_key=True, autoincrement=True)
    ad_id = Column(Integer, ForeignKey("t_ad.id"), nullable=False, index=True)

    # URL
    url_original = Column(String, nullable=False)  # 원본 이미지 URL

    # 관계
    ad = relationship("Ad", back_populates="photos")

    def __repr__(self):
        return f"<Photo {self.id} ad={self.ad_id}>"
