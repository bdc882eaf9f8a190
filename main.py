# main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.config import settings
from app.api.deps import get_processor, get_uploader
from app.api.routes import ads, photos
from app.core.errors import (
    AdServiceError,
    ad_service_error_handler,
    unhandled_error_handler,
    validation_error_handler,
)
from app.core.logging_middleware import log_requests
from app.core.logger import logger
from app.database import verify_schema

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug
)

# ===== 로깅 미들웨어 추가 (가장 먼저) =====
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    return await log_requests(request, call_next)
# ==========================================

# 요청 크기 제한 미들웨어
MAX_REQUEST_SIZE = settings.max_request_size_mb * 1024 * 1024

@app.middleware("http")
async def limit_upload_size(request: Request, call_next):
    """요청 크기 제한"""
    if request.method in ["POST", "PUT", "PATCH"]:
        content_length = request.headers.get("content-length")
        if content_length and int(content_length) > MAX_REQUEST_SIZE:
            return JSONResponse(
                status_code=413,
                content={"error": f"request too large (max {MAX_REQUEST_SIZE // 1024 // 1024}MB)"}
            )
    return await call_next(request)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 에러 → {"error": 메시지}
app.add_exception_handler(AdServiceError, ad_service_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

# 라우터 등록
app.include_router(ads.router)
app.include_router(photos.router)

# ===== 시작 로그 추가 =====
@app.on_event("startup")
async def startup_event():
    # 스키마는 alembic 으로 미리 생성되어 있어야 함
    verify_schema()
    logger.info("Ad Manager API 서버 시작")

@app.on_event("shutdown")
async def shutdown_event():
    if get_processor.cache_info().currsize:
        get_processor().close()
    if get_uploader.cache_info().currsize:
        get_uploader().close()
    logger.info("Ad Manager API 서버 종료")
# ==========================

@app.get("/health")
def health_check():
    """헬스체크"""
    return {
        "status": "healthy",
        "service": settings.app_name
    }

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port)
