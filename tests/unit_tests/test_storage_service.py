import time

import boto3
import pytest

from app.config import settings
from app.core.errors import AdServiceError, ErrorKind
from app.services.storage_service import MIN_PART_SIZE, ObjectUploader, make_s3_client
from tests.consts import TEST_BUCKET_NAME, TEST_PHOTO_CONTENT, TEST_PHOTO_CONTENT_TYPE


def test_small_object_is_put_in_one_call(s3_uploader, mocked_aws):
    with s3_uploader.open("1-small", content_type=TEST_PHOTO_CONTENT_TYPE) as writer:
        writer.write(TEST_PHOTO_CONTENT[:5])
        writer.write(TEST_PHOTO_CONTENT[5:])

    obj = mocked_aws.get_object(Bucket=TEST_BUCKET_NAME, Key="1-small")
    assert obj["Body"].read() == TEST_PHOTO_CONTENT
    assert obj["ContentType"] == TEST_PHOTO_CONTENT_TYPE
    assert writer.bytes_written == len(TEST_PHOTO_CONTENT)


def test_large_object_switches_to_multipart(s3_uploader, mocked_aws):
    chunk = b"x" * (1024 * 1024)
    total = MIN_PART_SIZE + 3 * len(chunk)

    with s3_uploader.open("1-large") as writer:
        for _ in range(total // len(chunk)):
            writer.write(chunk)
        assert writer._upload_id is not None

    obj = mocked_aws.get_object(Bucket=TEST_BUCKET_NAME, Key="1-large")
    assert obj["ContentLength"] == total


def test_error_inside_block_aborts_multipart(s3_uploader, mocked_aws):
    with pytest.raises(RuntimeError):
        with s3_uploader.open("1-aborted") as writer:
            writer.write(b"y" * MIN_PART_SIZE)
            raise RuntimeError("client disconnected")

    assert mocked_aws.list_multipart_uploads(Bucket=TEST_BUCKET_NAME).get("Uploads", []) == []
    listing = mocked_aws.list_objects_v2(Bucket=TEST_BUCKET_NAME)
    assert listing.get("KeyCount", 0) == 0


def test_expired_deadline_fails_as_upload_error(s3_uploader, mocked_aws):
    writer = s3_uploader.open("1-late", deadline=time.monotonic() - 1)

    with pytest.raises(AdServiceError) as exc_info:
        writer.write(TEST_PHOTO_CONTENT)

    assert exc_info.value.kind is ErrorKind.UPLOAD
    assert isinstance(exc_info.value.cause, TimeoutError)
    assert writer.closed


def test_finalize_failure_is_distinct_from_upload_failure(mocked_aws):
    uploader = ObjectUploader(
        boto3.client("s3", region_name="us-east-1"),
        bucket="bucket-that-does-not-exist",
        public_base_url="https://s3.amazonaws.com",
    )
    writer = uploader.open("1-nowhere")
    writer.write(TEST_PHOTO_CONTENT)

    with pytest.raises(AdServiceError) as exc_info:
        writer.close()

    assert exc_info.value.kind is ErrorKind.FINALIZE


def test_url_is_derived_from_key(s3_uploader):
    assert s3_uploader.url_for("3-42-abcd") == f"https://s3.amazonaws.com/{TEST_BUCKET_NAME}/3-42-abcd"


def test_delete_removes_object(s3_uploader, mocked_aws):
    with s3_uploader.open("1-gone") as writer:
        writer.write(TEST_PHOTO_CONTENT)

    s3_uploader.delete("1-gone")

    assert mocked_aws.list_objects_v2(Bucket=TEST_BUCKET_NAME).get("KeyCount", 0) == 0


def test_close_releases_s3_client():
    class RecordingClient:
        closed = False

        def close(self):
            self.closed = True

    s3 = RecordingClient()
    uploader = ObjectUploader(s3, bucket=TEST_BUCKET_NAME, public_base_url="https://s3.amazonaws.com")

    uploader.close()

    assert s3.closed


def test_s3_client_read_timeout_comes_from_settings(mocked_aws):
    custom = settings.model_copy(update={"storage_read_timeout_seconds": 3.5})

    s3 = make_s3_client(custom)

    assert s3.meta.config.read_timeout == 3.5
    assert s3.meta.config.connect_timeout == 5
