"""
Configuration module for the OpenImmo Sync Service.
"""

from enum import Enum
from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Settings for the OpenImmo Sync Service.
    Loads environment variables, with fallbacks to default values where appropriate.
    All environment variables are prefixed with OPENIMMO_SYNC_SERVICE_.
    """

    # Core service settings
    ENVIRONMENT: Environment = Field(
        Environment.DEVELOPMENT,
        alias="OPENIMMO_SYNC_SERVICE_ENVIRONMENT",
        description="Application environment",
    )
    ROOT_PATH: str = Field(
        "",
        alias="OPENIMMO_SYNC_SERVICE_ROOT_PATH",
        description="API root path for reverse proxies",
    )
    LOGGING_LEVEL: str = Field(
        "INFO",
        alias="OPENIMMO_SYNC_SERVICE_LOGGING_LEVEL",
        description="Logging level",
    )

    # CORS settings
    CORS_ALLOW_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        alias="OPENIMMO_SYNC_SERVICE_CORS_ALLOW_ORIGINS",
        description="List of origins that are allowed to make cross-origin requests",
    )

    # FTP feed server
    FTP_HOST: str = Field(
        "",
        alias="OPENIMMO_SYNC_SERVICE_FTP_HOST",
        description="Host of the FTP server delivering the OpenImmo feed",
    )
    FTP_PORT: int = Field(21, alias="OPENIMMO_SYNC_SERVICE_FTP_PORT")
    FTP_USER: str = Field("", alias="OPENIMMO_SYNC_SERVICE_FTP_USER")
    FTP_PASSWORD: str = Field("", alias="OPENIMMO_SYNC_SERVICE_FTP_PASSWORD")
    FTP_TIMEOUT_SECONDS: float = Field(
        30.0,
        alias="OPENIMMO_SYNC_SERVICE_FTP_TIMEOUT_SECONDS",
        description="Socket timeout for FTP connections",
    )
    REMOTE_FOLDER: str = Field(
        "/",
        alias="OPENIMMO_SYNC_SERVICE_REMOTE_FOLDER",
        description="Remote directory holding the OpenImmo XML files",
    )

    # Webflow CMS
    WEBFLOW_TOKEN: str = Field(
        "",
        alias="OPENIMMO_SYNC_SERVICE_WEBFLOW_TOKEN",
        description="Webflow API token with CMS read/write and site publish scopes",
    )
    WEBFLOW_API_BASE_URL: str = Field(
        "https://api.webflow.com",
        alias="OPENIMMO_SYNC_SERVICE_WEBFLOW_API_BASE_URL",
        description="Base URL of the Webflow REST API",
    )
    WEBFLOW_REQUEST_TIMEOUT_SECONDS: float = Field(
        30.0, alias="OPENIMMO_SYNC_SERVICE_WEBFLOW_REQUEST_TIMEOUT_SECONDS"
    )
    COLLECTION_ID: str = Field(
        "",
        alias="OPENIMMO_SYNC_SERVICE_COLLECTION_ID",
        description="Webflow collection receiving the listings",
    )
    SITE_ID: str = Field(
        "",
        alias="OPENIMMO_SYNC_SERVICE_SITE_ID",
        description="Webflow site published after changes",
    )

    # Publishing
    PUBLISH_MAX_RETRIES: int = Field(
        5,
        alias="OPENIMMO_SYNC_SERVICE_PUBLISH_MAX_RETRIES",
        description="Maximum publish retries after a rate limit response",
    )
    PUBLISH_RETRY_DELAY_SECONDS: float = Field(
        60.0,
        alias="OPENIMMO_SYNC_SERVICE_PUBLISH_RETRY_DELAY_SECONDS",
        description="Fixed delay between publish retries",
    )

    # Trigger
    CRON_TIMEOUT_SECONDS: float = Field(
        50.0,
        alias="OPENIMMO_SYNC_SERVICE_CRON_TIMEOUT_SECONDS",
        description="Time budget before the trigger endpoint answers while the run continues",
    )

    @field_validator("REMOTE_FOLDER")
    def validate_remote_folder(cls, v: str, info: Any) -> str:
        return v or "/"

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        return self.ENVIRONMENT == Environment.TESTING

    def ftp_configured(self) -> bool:
        return bool(self.FTP_HOST and self.FTP_USER)

    def webflow_configured(self) -> bool:
        return bool(self.WEBFLOW_TOKEN and self.COLLECTION_ID and self.SITE_ID)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Create a global instance of the settings
settings = Settings()
