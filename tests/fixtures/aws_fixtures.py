"""S3 fixtures backed by moto."""
import boto3
import pytest
from moto import mock_aws

from app.config import settings
from app.services.storage_service import ObjectUploader, make_s3_client
from tests.consts import TEST_BUCKET_NAME, TEST_PUBLIC_BASE_URL


@pytest.fixture
def mocked_aws():
    with mock_aws():
        s3_client = boto3.client("s3", region_name="us-east-1")
        s3_client.create_bucket(Bucket=TEST_BUCKET_NAME)
        yield s3_client


@pytest.fixture
def s3_uploader(mocked_aws):
    return ObjectUploader(
        make_s3_client(settings),
        bucket=TEST_BUCKET_NAME,
        public_base_url=TEST_PUBLIC_BASE_URL,
    )
