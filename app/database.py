# app/database.py
from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings

# 서비스가 사용하는 테이블 (마이그레이션으로 생성)
REQUIRED_TABLES = ("t_ad", "t_photo")

# 데이터베이스 엔진 생성
if settings.database_url.startswith("sqlite"):
    # sqlite는 스레드풀에서 접근하므로 check_same_thread=False
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},
        echo=settings.debug
    )

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # Postgres와 동일하게 외래키 제약을 적용
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    engine = create_engine(
        settings.database_url,
        pool_pre_ping=True,
        echo=settings.debug  # SQL 쿼리 로그 출력
    )

# 세션 팩토리
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base 클래스 (모든 모델의 부모)
Base = declarative_base()

# DB 세션 의존성 (FastAPI에서 사용)
def get_db():
    """DB 세션 생성 및 종료"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def verify_schema(bind: Engine = engine) -> None:
    """필수 테이블 존재 확인 (없으면 즉시 실패)"""
    existing = set(inspect(bind).get_table_names())
    missing = [name for name in REQUIRED_TABLES if name not in existing]
    if missing:
        raise RuntimeError(
            f"missing tables: {', '.join(missing)} (run `alembic upgrade head` first)"
        )
