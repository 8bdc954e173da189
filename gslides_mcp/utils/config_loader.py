"""
Configuration loader with type-safe Pydantic models.
Loads and validates environment variables for the Google Slides MCP server.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
ENV_PATH = CONFIG_DIR / ".env"

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SlidesServerConfig(BaseSettings):
    """Settings for the Google Slides MCP server."""

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
        populate_by_name=True
    )

    # Google credentials
    token_path: Path = Field(
        default=CONFIG_DIR / "google_slides_token.json",
        alias="GSLIDES_TOKEN_PATH",
        description="OAuth token file produced by --authorize"
    )
    client_secrets_path: Path = Field(
        default=CONFIG_DIR / "credentials.json",
        alias="GSLIDES_CLIENT_SECRETS_PATH",
        description="OAuth client secrets downloaded from Google Cloud Console"
    )
    upload_folder_id: Optional[str] = Field(
        default=None,
        alias="GSLIDES_UPLOAD_FOLDER_ID",
        description="Drive folder for uploaded images and backgrounds"
    )

    # Logging
    log_level: str = Field(default="INFO", alias="GSLIDES_LOG_LEVEL")
    log_dir: Path = Field(default=Path("logs"), alias="GSLIDES_LOG_DIR")
    enable_file_logging: bool = Field(default=True, alias="GSLIDES_ENABLE_FILE_LOGGING")

    # Remote call retry
    retry_attempts: int = Field(default=3, ge=1, alias="GSLIDES_RETRY_ATTEMPTS")
    retry_max_wait: float = Field(default=10.0, gt=0, alias="GSLIDES_RETRY_MAX_WAIT")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate that the log level is a standard logging level name."""
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level


# Global config instance
_config: Optional[SlidesServerConfig] = None


def get_config() -> SlidesServerConfig:
    """
    Get the global configuration instance.

    Returns:
        SlidesServerConfig instance
    """
    global _config

    if _config is None:
        if ENV_PATH.exists():
            load_dotenv(ENV_PATH)
        _config = SlidesServerConfig()

    return _config


def reset_config() -> None:
    """Drop the cached configuration (used by tests and CLI overrides)."""
    global _config
    _config = None
