# app/core/logging_middleware.py
from fastapi import Request
from app.core.logger import logger
import time
import uuid

REQUEST_ID_HEADER = "X-Request-ID"

async def log_requests(request: Request, call_next):
    """모든 요청/응답 로깅 + 요청 ID 부여"""

    # 요청 ID (클라이언트가 보낸 값 우선)
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id

    # 요청 시작 시간
    start_time = time.time()

    with logger.contextualize(request_id=request_id):
        # 요청 정보 로깅
        logger.info(f"➡️  {request.method} {request.url.path}")

        # 요청 처리
        try:
            response = await call_next(request)

            # 응답 시간 계산
            process_time = (time.time() - start_time) * 1000  # ms

            # 응답 로깅
            logger.info(
                f"⬅️  {request.method} {request.url.path} "
                f"- Status: {response.status_code} "
                f"- Time: {process_time:.2f}ms"
            )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        except Exception as e:
            process_time = (time.time() - start_time) * 1000

            # 에러 로깅
            logger.error(
                f"❌ {request.method} {request.url.path} "
                f"- Error: {str(e)} "
                f"- Time: {process_time:.2f}ms"
            )
            logger.exception("Exception details:")

            raise
