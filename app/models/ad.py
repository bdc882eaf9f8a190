# app/models/ad.py
from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

class Ad(Base):
    """광고 모델"""
    __tablename__ = "t_ad"

    # 기본 필드
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False)  # 작성자 (생성 후 변경 불가)

    # 광고 내용
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    price = Column(Float, nullable=True)

    # 타임스탬프
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # 관계 (삭제 시 cascade 하지 않음)
    photos = relationship("Photo", back_populates="ad", passive_deletes="all")

    def __repr__(self):
        return f"<Ad {self.id} {self.title}>"
