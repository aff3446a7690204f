"""Application settings from environment variables and code defaults.

Priority chain (highest to lowest):
  1. Init kwargs   — passed to ``BookingSettings(...)`` directly (tests)
  2. Env vars      — ``ROOMBOOK_*`` prefix, e.g. ``ROOMBOOK_WORK_START=07:00``
  3. Code defaults
"""

from __future__ import annotations

from datetime import time

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ledger import DEFAULT_WORK_END, DEFAULT_WORK_START


class BookingSettings(BaseSettings):
    """Settings for one running booking service.

    Attributes:
        work_start: Earliest clock time a booking may start.
        work_end: Latest clock time a booking may end.
        verbose: Log at DEBUG instead of INFO.
        log_json: Emit JSON log lines instead of console output.
        seed_demo_data: Register the demo rooms at startup.
    """

    model_config = SettingsConfigDict(env_prefix="ROOMBOOK_", frozen=True)

    work_start: time = DEFAULT_WORK_START
    work_end: time = DEFAULT_WORK_END
    verbose: bool = False
    log_json: bool = False
    seed_demo_data: bool = True

    @model_validator(mode="after")
    def _check_business_hours(self) -> BookingSettings:
        if self.work_start >= self.work_end:
            raise ValueError("work_start must be before work_end")
        return self
