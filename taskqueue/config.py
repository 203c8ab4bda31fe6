"""Configuration management for the task queue."""

from __future__ import annotations

import logging
import os
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QueueSettings(BaseSettings):
    """Pydantic-powered settings for queues built from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="TASKQUEUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    concurrency_limit: int = Field(
        2, description="Maximum number of tasks allowed to run at once."
    )
    log_level: str = Field("INFO", description="Logging level for the queue and demo.")
    log_file: Optional[str] = Field(None, description="Optional file path for logs.")

    @field_validator("concurrency_limit")
    @classmethod
    def positive_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("concurrency_limit must be a positive integer.")
        return value

    @field_validator("log_level")
    @classmethod
    def uppercase_log_level(cls, value: str) -> str:
        return value.upper()

    def configure_logging(self) -> None:
        """Configure root logging according to settings."""
        handlers = [logging.StreamHandler()]
        if self.log_file:
            log_dir = os.path.dirname(self.log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(self.log_file))
        logging.basicConfig(
            level=getattr(logging, self.log_level, logging.INFO),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            handlers=handlers,
        )


settings = QueueSettings()
