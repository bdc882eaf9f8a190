# app/services/store_service.py
from typing import Any

from sqlalchemy import update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import AdServiceError, ErrorKind
from app.models.ad import Ad
from app.models.photo import Photo

class SqlStore:
    """모델 하나에 대한 생성/수정/삭제

    수정/삭제는 영향받은 행 수를 반환한다 (0 이면 존재하지 않음).
    모든 변경은 각자 커밋하며, DB 에러는 STORE 에러로 감싼다.
    """

    model = None

    def __init__(self, db: Session):
        self.db = db

    def create(self, **values: Any):
        row = self.model(**values)
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise AdServiceError(ErrorKind.STORE, cause=e) from e
        return row

    def update_by_id(self, row_id: int, values: dict[str, Any]) -> int:
        stmt = update(self.model).where(self.model.id == row_id).values(**values)
        return self._execute(stmt)

    def delete_by_id(self, row_id: int) -> int:
        stmt = delete(self.model).where(self.model.id == row_id)
        return self._execute(stmt)

    def _execute(self, stmt) -> int:
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise AdServiceError(ErrorKind.STORE, cause=e) from e
        return result.rowcount


class AdStore(SqlStore):
    model = Ad


class PhotoStore(SqlStore):
    model = Photo

    def delete_scoped(self, ad_id: int, photo_id: int) -> int:
        """광고 ID 와 사진 ID 가 모두 일치할 때만 삭제"""
        stmt = delete(Photo).where(Photo.id == photo_id, Photo.ad_id == ad_id)
        return self._execute(stmt)
