"""Application configuration."""

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    projects_root: Path | None = None
    debug: bool = False
    app_title: str = "AYCD"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="AYCD_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


def configure_logging(config: Settings) -> None:
    """Apply the configured log level to the root logger."""
    level = logging.DEBUG if config.debug else config.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
