"""Test configuration: environment first, then fixture plugins."""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="ad_manager_tests_")

os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test_ad_manager.db')}"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["S3_BUCKET_NAME"] = "test-ad-photos"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["IMAGE_PROCESSOR_URL"] = "http://image-processor.test"
os.environ.pop("AWS_ENDPOINT_URL", None)

pytest_plugins = [
    "tests.fixtures.db_client",
    "tests.fixtures.aws_fixtures",
    "tests.fixtures.service_fixtures",
]
