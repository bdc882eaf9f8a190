"""
Object storage (S3 API) 업로드.

- ObjectUploader.open(key) -> ObjectWriter 로 청크 단위 스트리밍
- 작은 객체는 put_object 한 번, 5MB 이상이면 multipart upload 로 전환
- 전송 중 실패(UPLOAD)와 마무리 실패(FINALIZE)를 구분한다
- 마감 시각은 청크 사이와 마무리 직전에만 확인한다. 이미 시작된 S3 호출은
  read_timeout (STORAGE_READ_TIMEOUT_SECONDS) 까지 더 걸릴 수 있다
"""

import time
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings
from app.core.errors import AdServiceError, ErrorKind
from app.core.logger import logger

# S3 multipart 최소 파트 크기 (마지막 파트 제외)
MIN_PART_SIZE = 5 * 1024 * 1024
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def make_s3_client(settings: Settings):
    """S3 클라이언트 생성 (재시도 없음)"""
    return boto3.client(
        "s3",
        region_name=settings.aws_default_region,
        endpoint_url=settings.aws_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        config=Config(
            connect_timeout=5,
            read_timeout=settings.storage_read_timeout_seconds,
            retries={"total_max_attempts": 1, "mode": "standard"},
        ),
    )


class ObjectWriter:
    """하나의 객체에 대한 쓰기 채널

    ``with`` 블록이 정상 종료되면 close()(마무리), 예외로 빠져나가면 abort().
    """

    def __init__(self, client, bucket: str, key: str,
                 deadline: Optional[float] = None,
                 content_type: Optional[str] = None):
        self.client = client
        self.bucket = bucket
        self.key = key
        self.deadline = deadline
        self.content_type = content_type or DEFAULT_CONTENT_TYPE
        self.bytes_written = 0
        self.closed = False
        self._buffer = bytearray()
        self._upload_id = None
        self._parts = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
        else:
            self.abort()
        return False

    def write(self, chunk: bytes) -> None:
        if self.closed:
            raise AdServiceError(ErrorKind.UPLOAD, "write on closed object writer")
        self._check_deadline()
        self._buffer.extend(chunk)
        self.bytes_written += len(chunk)
        if len(self._buffer) >= MIN_PART_SIZE:
            try:
                self._flush_part()
            except (BotoCoreError, ClientError) as e:
                raise AdServiceError(ErrorKind.UPLOAD, cause=e) from e

    def close(self) -> None:
        """업로드 마무리 (flush + complete)"""
        if self.closed:
            return
        self._check_deadline()
        try:
            if self._upload_id is None:
                self.client.put_object(
                    Bucket=self.bucket,
                    Key=self.key,
                    Body=bytes(self._buffer),
                    ContentType=self.content_type,
                )
            else:
                if self._buffer:
                    self._flush_part()
                self.client.complete_multipart_upload(
                    Bucket=self.bucket,
                    Key=self.key,
                    UploadId=self._upload_id,
                    MultipartUpload={"Parts": self._parts},
                )
        except (BotoCoreError, ClientError) as e:
            self.abort()
            raise AdServiceError(ErrorKind.FINALIZE, cause=e) from e
        self.closed = True
        self._buffer.clear()
        logger.debug(f"업로드 완료: s3://{self.bucket}/{self.key} ({self.bytes_written} bytes)")

    def abort(self) -> None:
        """진행 중인 multipart upload 취소"""
        if self.closed:
            return
        self.closed = True
        self._buffer.clear()
        if self._upload_id is None:
            return
        try:
            self.client.abort_multipart_upload(
                Bucket=self.bucket, Key=self.key, UploadId=self._upload_id
            )
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"multipart upload 취소 실패 ({self.key}): {e}")

    def _flush_part(self) -> None:
        if self._upload_id is None:
            response = self.client.create_multipart_upload(
                Bucket=self.bucket, Key=self.key, ContentType=self.content_type
            )
            self._upload_id = response["UploadId"]
        part_number = len(self._parts) + 1
        response = self.client.upload_part(
            Bucket=self.bucket,
            Key=self.key,
            PartNumber=part_number,
            UploadId=self._upload_id,
            Body=bytes(self._buffer),
        )
        self._parts.append({"ETag": response["ETag"], "PartNumber": part_number})
        self._buffer.clear()

    def _check_deadline(self) -> None:
        if self.deadline is not None and time.monotonic() > self.deadline:
            self.abort()
            raise AdServiceError(
                ErrorKind.UPLOAD, cause=TimeoutError(f"upload of {self.key} timed out")
            )


class ObjectUploader:
    """버킷 하나에 대한 업로더"""

    def __init__(self, client, bucket: str, public_base_url: str):
        self.client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    def url_for(self, key: str) -> str:
        """객체 공개 URL (업로드 전에 결정됨)"""
        return f"{self.public_base_url}/{self.bucket}/{key}"

    def open(self, key: str, deadline: Optional[float] = None,
             content_type: Optional[str] = None) -> ObjectWriter:
        return ObjectWriter(self.client, self.bucket, key, deadline, content_type)

    def close(self) -> None:
        """S3 클라이언트 연결 정리 (종료 시)"""
        self.client.close()

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise AdServiceError(ErrorKind.UPLOAD, f"failed to delete {key}", cause=e) from e
