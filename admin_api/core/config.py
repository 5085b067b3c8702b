from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ── App ──────────────────────────────────────────────────────────────────
    app_name: str = "Admin User Directory"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # ── AWS Region ───────────────────────────────────────────────────────────
    aws_region: str = Field(default="us-east-1", alias="AWS_REGION")

    # ── DynamoDB ─────────────────────────────────────────────────────────────
    dynamodb_table_name: str = Field(
        default="AdminUserDirectory", alias="DYNAMODB_TABLE_NAME"
    )
    # Empty means real AWS; set to http://localhost:8000 for DynamoDB Local
    dynamodb_endpoint_url: str = Field(default="", alias="DYNAMODB_ENDPOINT_URL")

    # ── AWS Cognito ───────────────────────────────────────────────────────────
    cognito_user_pool_id: str = Field(default="", alias="COGNITO_USER_POOL_ID")
    cognito_client_id: str = Field(default="", alias="COGNITO_CLIENT_ID")
    cognito_region: str = Field(default="us-east-1", alias="COGNITO_REGION")

    # ── Session ───────────────────────────────────────────────────────────────
    session_cookie_name: str = Field(
        default="admin_session", alias="SESSION_COOKIE_NAME"
    )
    role_claim: str = Field(default="custom:role", alias="ROLE_CLAIM")
    admin_group: str = Field(default="admin", alias="ADMIN_GROUP")

    # ── CORS ─────────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"], alias="CORS_ORIGINS"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
