from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings

from app.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings."""
    PROJECT_NAME: str = "Recipe Generator API"
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # n8n workflow that generates the recipe
    N8N_WEBHOOK_URL: Optional[str] = None
    WEBHOOK_TIMEOUT_SECONDS: float = 30.0

    # AWS Settings
    AWS_REGION: str = "us-west-1"
    # AWS credentials - optional if using IAM roles or aws configure
    AWS_ACCESS_KEY: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    # DynamoDB settings
    DYNAMODB_TABLE_NAME: str = "recipes"
    DYNAMODB_USER_INDEX: str = "user_index"
    DYNAMODB_ENDPOINT_URL: Optional[str] = None  # Set for local testing

    class Config:
        env_file = ".env"
        case_sensitive = True

    def require_webhook_url(self) -> str:
        if not self.N8N_WEBHOOK_URL:
            raise ConfigurationError("N8N webhook URL is not configured")
        return self.N8N_WEBHOOK_URL

    def missing_required(self) -> List[str]:
        """Names of settings a request will fail on when they are unset."""
        missing = []
        if not self.N8N_WEBHOOK_URL:
            missing.append("N8N_WEBHOOK_URL")
        if not self.DYNAMODB_TABLE_NAME:
            missing.append("DYNAMODB_TABLE_NAME")
        return missing


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
