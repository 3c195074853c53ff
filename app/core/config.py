from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

QR_SALT_MIN_LENGTH = 32


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Secret folded into every employee QR code hash. Rotating it invalidates all issued codes.
    qr_salt: str = Field(..., alias="QR_SALT")
    # Calendar day boundary for "already scanned today"
    org_timezone: str = Field("UTC", alias="ORG_TIMEZONE")
    store_timeout_seconds: float = Field(10.0, alias="STORE_TIMEOUT_SECONDS", gt=0)

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    initial_admin_username: Optional[str] = Field(None, alias="INITIAL_ADMIN_USERNAME")
    initial_admin_password: Optional[str] = Field(None, alias="INITIAL_ADMIN_PASSWORD")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @field_validator("qr_salt")
    @classmethod
    def validate_qr_salt(cls, value: str) -> str:
        if len(value) < QR_SALT_MIN_LENGTH:
            raise ValueError(f"QR_SALT must be at least {QR_SALT_MIN_LENGTH} characters")
        return value

    @field_validator("org_timezone")
    @classmethod
    def validate_org_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.org_timezone)


settings = Settings()
