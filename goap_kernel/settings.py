"""
Environment-driven settings.

All values bind from ``GOAP_*`` environment variables or a ``.env`` file,
for example ``GOAP_MAX_ITERATIONS=50000`` or ``GOAP_LOG_LEVEL=DEBUG``.
Library code never reads the environment itself: callers build a
PlannerConfig from these settings and pass it to a planner.
"""

import logging
import sys
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from goap_kernel.models.planner import PlannerConfig

LOG_FORMAT = "[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class PlannerSettings(BaseSettings):
    """Planner and logging settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="GOAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_iterations: int = Field(
        default=10000, ge=1, description="Open-list pops allowed per search"
    )
    timeout_seconds: Optional[float] = Field(
        default=None, gt=0, description="Wall-clock limit per search"
    )
    resolve_unknown_conditions: bool = Field(
        default=True, description="Evaluate UNKNOWN conditions that change the plan"
    )
    log_level: str = Field(default="INFO", description="Level for the goap_kernel logger")

    def planner_config(self) -> PlannerConfig:
        return PlannerConfig(
            max_iterations=self.max_iterations,
            timeout_seconds=self.timeout_seconds,
            resolve_unknown_conditions=self.resolve_unknown_conditions,
        )


def configure_logging(settings: Optional[PlannerSettings] = None) -> logging.Logger:
    """
    Attach a console handler to the ``goap_kernel`` logger.

    Safe to call more than once: an existing handler is reused and only
    the level is updated.
    """
    settings = settings or PlannerSettings()
    logger = logging.getLogger("goap_kernel")
    logger.setLevel(settings.log_level.upper())

    if not any(getattr(h, "_goap_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        handler._goap_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
