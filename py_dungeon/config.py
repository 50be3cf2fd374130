"""Configuration management."""

import logging
from typing import Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Triangulation
    insertion_sort_threshold: int = Field(
        default=20, ge=1, description="Partition size below which ordering uses insertion sort"
    )
    validate_output: bool = Field(
        default=False, description="Verify every triangulation before returning it"
    )
    validation_tolerance: float = Field(
        default=1e-9, ge=0, description="Relative tolerance for area and in-circle checks"
    )

    # Corridors
    corridor_curve_length: float = Field(
        default=15.0, description="Corridors longer than this are drawn as curves"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()  # type: ignore[call-arg]


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structlog for the whole package.

    Falls back to the values from ``settings`` when no arguments are given.
    """
    level = (level or settings.log_level).upper()
    log_format = log_format or settings.log_format

    logging.basicConfig(format="%(message)s", level=getattr(logging, level, logging.INFO))

    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
