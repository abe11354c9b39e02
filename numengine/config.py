"""Runtime settings read from the environment.

NUMENGINE_LOG_LEVEL   logging level name            (default WARNING)
NUMENGINE_LOG_JSON    emit JSON log lines if true   (default false)
NUMENGINE_PRECISION   decimals in rendered results  (default 2, 0-15)
"""
from __future__ import annotations

import logging
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "NUMENGINE_"
MAX_PRECISION = 15


class ConfigurationError(ValueError):
    """Raised when a setting has an unusable value."""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, frozen=True)

    log_level: str = "WARNING"
    log_json: bool = False
    precision: int = Field(2, ge=0, le=MAX_PRECISION)

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings(**overrides: Any) -> Settings:
    """Settings from the environment, with non-None ``overrides`` on top."""
    given = {k: v for k, v in overrides.items() if v is not None}
    try:
        return Settings(**given)
    except ValidationError as e:
        problems = "; ".join(
            f"{ENV_PREFIX}{'_'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(problems) from e
