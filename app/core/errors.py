# app/core/errors.py
import enum

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logger import logger

class ErrorKind(str, enum.Enum):
    """서비스 에러 종류"""
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"      # 예약 (현재 발생하지 않음)
    INCONSISTENT_IDS = "inconsistent_ids"  # 예약 (현재 발생하지 않음)
    MISSING_FIELDS = "missing_fields"
    BAD_ROUTING = "bad_routing"
    INVALID_REQUEST = "invalid_request"
    UPLOAD = "upload"
    FINALIZE = "finalize"
    PROCESSOR_REJECTED = "processor_rejected"
    PROCESSOR_UNAVAILABLE = "processor_unavailable"
    STORE = "store"

# 종류별 기본 메시지
DEFAULT_MESSAGES = {
    ErrorKind.NOT_FOUND: "not found",
    ErrorKind.ALREADY_EXISTS: "already exists",
    ErrorKind.INCONSISTENT_IDS: "inconsistent IDs",
    ErrorKind.MISSING_FIELDS: "missing fields",
    ErrorKind.BAD_ROUTING: "expected URL variable is missing",
    ErrorKind.INVALID_REQUEST: "invalid request",
    ErrorKind.UPLOAD: "upload failed",
    ErrorKind.FINALIZE: "upload finalize failed",
    ErrorKind.PROCESSOR_REJECTED: "image processing rejected",
    ErrorKind.PROCESSOR_UNAVAILABLE: "image processor unavailable",
    ErrorKind.STORE: "store failure",
}

# HTTP 상태 코드 매핑 (나머지는 500)
STATUS_CODES = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_EXISTS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INCONSISTENT_IDS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.MISSING_FIELDS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BAD_ROUTING: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
}


class AdServiceError(Exception):
    """서비스 계층에서 발생하는 유일한 예외

    호출자는 예외 타입이 아니라 ``kind`` 로 분기한다.
    ``cause`` 는 원인 예외 (로그용, 응답에는 노출하지 않음).
    """

    def __init__(self, kind: ErrorKind, message: str | None = None, cause: BaseException | None = None):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        self.cause = cause
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def status_code(self) -> int:
        return STATUS_CODES.get(self.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def __repr__(self):
        return f"<AdServiceError {self.kind.value}: {self.message}>"


def error_response(status_code: int, message: str) -> JSONResponse:
    """에러 응답 포맷 {"error": 메시지}"""
    return JSONResponse(status_code=status_code, content={"error": message})


async def ad_service_error_handler(request: Request, exc: AdServiceError):
    if exc.status_code >= 500:
        logger.error(f"{exc.kind.value}: {exc.message} (cause: {exc.cause!r})")
    else:
        logger.warning(f"{exc.kind.value}: {exc.message}")
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # 요청 본문 파싱/타입 오류
    logger.warning(f"invalid request: {exc.errors()}")
    return error_response(
        STATUS_CODES[ErrorKind.INVALID_REQUEST],
        DEFAULT_MESSAGES[ErrorKind.INVALID_REQUEST]
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    # 예상하지 못한 예외도 {"error": ...} 형식으로
    logger.exception(f"unhandled error: {exc!r}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")
