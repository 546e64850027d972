from typing import Literal, Mapping, Optional
from functools import lru_cache
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator


ENV_PREFIX = "ASYNCFSM_"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


class EngineSettings(BaseModel):
    """Runtime settings for the engine and its logging"""
    model_config = ConfigDict(frozen=True)

    log_level: str = Field(default="INFO", description="Level passed to the stdlib root logger")
    log_format: Literal["json", "console"] = Field(default="json", description="structlog renderer")
    service_name: str = Field(default="asyncfsm", description="Bound into every log entry")
    trace_transitions: bool = Field(default=True, description="Emit a debug entry per state transition")
    collect_metrics: bool = Field(default=False, description="Feed the in-process metrics collector")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level {value!r}")
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        """Build settings from ``ASYNCFSM_*`` environment variables"""

        env = os.environ if environ is None else environ

        return cls(
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", "INFO"),
            log_format=env.get(ENV_PREFIX + "LOG_FORMAT", "json").strip().lower(),
            service_name=env.get(ENV_PREFIX + "SERVICE_NAME", "asyncfsm"),
            trace_transitions=_env_flag(env, "TRACE_TRANSITIONS", True),
            collect_metrics=_env_flag(env, "COLLECT_METRICS", False),
        )


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Process-wide settings, read from the environment once"""
    return EngineSettings.from_env()
