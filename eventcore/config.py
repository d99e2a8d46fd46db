"""Runtime settings read from ``EVENTCORE_*`` environment variables."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator

ErrorPolicy = Literal["propagate", "isolate"]

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseModel):
    log_level: str = "INFO"
    # "propagate": a failing listener aborts the dispatch and raises to the caller.
    # "isolate": failures are logged and the remaining listeners still run.
    error_policy: ErrorPolicy = "propagate"
    max_listeners: int = Field(default=10, ge=0)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return value

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Build settings from the environment, ignoring unset variables."""
        environ = os.environ if environ is None else environ
        values = {}
        for field in cls.model_fields:
            raw = environ.get(f"EVENTCORE_{field.upper()}")
            if raw is not None and raw != "":
                values[field] = raw
        if "error_policy" in values:
            values["error_policy"] = values["error_policy"].lower()
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
