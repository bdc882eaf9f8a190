# app/config.py
from pydantic_settings import BaseSettings
from pydantic import field_validator

class Settings(BaseSettings):
    """환경변수 설정"""

    # API 기본 설정
    app_name: str = "Ad Manager API"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080

    # Database
    database_url: str

    # Object storage (S3 호환)
    s3_bucket_name: str = "meshetr-images"
    aws_default_region: str = "us-east-1"
    aws_endpoint_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    storage_public_base_url: str = "https://s3.amazonaws.com"

    # 이미지 처리 서비스
    image_processor_url: str = "http://localhost:8081"

    # 타임아웃 (초)
    upload_timeout_seconds: float = 50.0
    storage_read_timeout_seconds: float = 10.0  # S3 호출 1회당 (업로드 마감 초과 허용치)
    processor_timeout_seconds: float = 10.0

    # 동작 옵션
    strict_cleanup: bool = False  # 부분 실패 시 업로드된 객체/행 정리
    require_price: bool = False

    # HTTP
    cors_origins: str = "*"
    max_request_size_mb: int = 32

    # 로그
    log_dir: str = "logs"

    @field_validator('upload_timeout_seconds', 'processor_timeout_seconds', 'storage_read_timeout_seconds')
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError('타임아웃은 0보다 커야 합니다')
        return v

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False

# 싱글톤 인스턴스
settings = Settings()
