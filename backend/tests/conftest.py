import os

import pytest
from moto import mock_aws

# moto needs credentials and a region before any boto3 client is built
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-west-1")

from app.core.config import Settings
from app.services.dynamodb_service import DynamoDBService

WEBHOOK_URL = "https://n8n.example.com/webhook/recipe"


@pytest.fixture
def test_settings():
    """Settings isolated from the developer's .env file."""
    return Settings(
        _env_file=None,
        N8N_WEBHOOK_URL=WEBHOOK_URL,
        WEBHOOK_TIMEOUT_SECONDS=5.0,
        AWS_REGION="us-west-1",
        DYNAMODB_TABLE_NAME="test-recipes",
        DYNAMODB_ENDPOINT_URL=None,
    )


@pytest.fixture
def dynamo_service(test_settings):
    """DynamoDB service backed by a moto table."""
    with mock_aws():
        service = DynamoDBService(test_settings)
        service.ensure_table_exists()
        yield service
