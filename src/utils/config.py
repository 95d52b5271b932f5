"""Runtime configuration for PlanetForge.

Simulation inputs (planet parameters, noise settings) live in immutable
dataclasses in the world_generation package. This module holds only the
settings that control how a run executes: worker pool sizing and logging.
They are read from environment variables prefixed with PLANETFORGE_.
"""

import logging
import sys
from typing import Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Configuration(BaseSettings):
    """Execution settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PLANETFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Worker pool
    max_workers: int = Field(default=4, ge=1, description="Threads used per generation pass")
    chunk_size: int = Field(default=512, ge=1, description="Cells handed to a worker at a time")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (console or json)")


def configure_logging(config: Optional[Configuration] = None) -> None:
    """Route structlog through the standard library logger.

    Args:
        config: Settings to read the level and format from, read from the
            environment when omitted
    """
    config = config if config is not None else Configuration()
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    if config.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

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
