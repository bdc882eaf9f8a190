"""
Image processor HTTP client.

Used endpoint:
- POST /process  {"id": <photo id>}  ->  {"code": "OK", "message": "..."}

처리 결과(code)는 값으로 반환하고, 연결 실패/잘못된 응답만 예외로 올린다.
timeout_s 는 httpx 의 단계별 (connect/write/read/pool) 제한이다. 호출 전체가
아니라 각 단계가 timeout_s 를 넘지 못한다.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from app.core.errors import AdServiceError, ErrorKind
from app.core.logging_middleware import REQUEST_ID_HEADER


class StatusCode(str, enum.Enum):
    """이미지 처리 결과 코드"""
    OK = "OK"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "StatusCode":
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class ProcessStatus:
    code: StatusCode
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.code is StatusCode.OK


class ImageProcessorClient:
    """이미지 처리 서비스 동기 클라이언트 (재시도 없음)"""

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        base_url = (base_url or "").strip()
        if not base_url:
            raise ValueError("IMAGE_PROCESSOR_URL is empty.")
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout_s),
            transport=transport,
        )

    def process(self, photo_id: int, request_id: Optional[str] = None) -> ProcessStatus:
        headers = {REQUEST_ID_HEADER: request_id} if request_id else {}
        try:
            resp = self._client.post("/process", json={"id": photo_id}, headers=headers)
        except httpx.HTTPError as e:
            raise AdServiceError(ErrorKind.PROCESSOR_UNAVAILABLE, cause=e) from e

        if resp.status_code != 200:
            # 큰 본문은 잘라서 남긴다
            body = resp.text[:500]
            raise AdServiceError(
                ErrorKind.PROCESSOR_UNAVAILABLE,
                cause=RuntimeError(f"image processor replied {resp.status_code}: {body}"),
            )

        try:
            data: dict[str, Any] = resp.json()
        except ValueError as e:
            raise AdServiceError(ErrorKind.PROCESSOR_UNAVAILABLE, cause=e) from e
        if not isinstance(data, dict) or "code" not in data:
            raise AdServiceError(
                ErrorKind.PROCESSOR_UNAVAILABLE,
                cause=RuntimeError(f"malformed image processor reply: {resp.text[:500]}"),
            )

        return ProcessStatus(
            code=StatusCode.parse(data["code"]),
            message=str(data.get("message") or ""),
        )

    def close(self) -> None:
        self._client.close()
