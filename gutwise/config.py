"""Engine configuration.

Environment-driven settings, loaded once at startup.

Environment variables:
    GUTWISE_CORRELATION_WINDOW_HOURS: Meal/symptom window (default 6)
    GUTWISE_INSIGHTS_LOOKBACK_DAYS: Insights history (default 30)
    GUTWISE_BATCH_MAX_CONCURRENCY: Remote calls in flight (default 5)
    GUTWISE_REMOTE_TIMEOUT_SECONDS: Per-dish remote timeout (default 12)
    GUTWISE_REMOTE_STAGGER_SECONDS: Delay per dish index (default 0.1)
    GUTWISE_REMOTE_ANALYSIS: "disabled" (default) or "openai"
    OPENAI_API_KEY: OpenAI key (remote analysis only)
    OPENAI_MODEL: OpenAI model (default gpt-4o-mini)
    GUTWISE_LOG_LEVEL: Log level (default INFO)
    GUTWISE_LOG_JSON: Render JSON logs (default false)
"""

import os
from datetime import timedelta
from typing import Optional

import structlog
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger(__name__)

REMOTE_DISABLED = "disabled"
REMOTE_OPENAI = "openai"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_float(name: str, default: float, minimum: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid number in environment, using default", var=name, value=raw)
        return default
    if value != value or value < minimum:
        logger.warning("Out of range value in environment, using default", var=name, value=raw)
        return default
    return value


def _env_int(name: str, default: int, minimum: int) -> int:
    value = _env_float(name, float(default), float(minimum))
    if not value.is_integer():
        logger.warning("Expected an integer in environment, using default", var=name)
        return default
    return int(value)


class EngineSettings(BaseModel):
    """
    Engine settings.

    Example:
        >>> settings = EngineSettings.from_env()
        >>> assert settings.correlation_window == timedelta(hours=6)
    """

    model_config = ConfigDict(frozen=True)

    correlation_window_hours: float = Field(6.0, ge=0)
    insights_lookback_days: int = Field(30, ge=1)
    batch_max_concurrency: int = Field(5, ge=1)
    remote_timeout_seconds: float = Field(12.0, gt=0)
    remote_stagger_seconds: float = Field(0.1, ge=0)
    remote_analysis: str = REMOTE_DISABLED
    openai_api_key: Optional[str] = Field(None, repr=False)
    openai_model: str = "gpt-4o-mini"
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def correlation_window(self) -> timedelta:
        return timedelta(hours=self.correlation_window_hours)

    @property
    def remote_enabled(self) -> bool:
        return self.remote_analysis == REMOTE_OPENAI and bool(self.openai_api_key)

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "EngineSettings":
        """
        Read settings from the environment.

        Args:
            dotenv: Load a .env file first (existing variables win)

        Returns:
            EngineSettings (invalid numbers fall back to defaults)
        """
        if dotenv:
            load_dotenv()

        remote = os.getenv("GUTWISE_REMOTE_ANALYSIS", REMOTE_DISABLED).strip().lower()
        if remote not in (REMOTE_DISABLED, REMOTE_OPENAI):
            logger.warning("Unknown GUTWISE_REMOTE_ANALYSIS, remote analysis disabled", value=remote)
            remote = REMOTE_DISABLED

        return cls(
            correlation_window_hours=_env_float("GUTWISE_CORRELATION_WINDOW_HOURS", 6.0, 0.0),
            insights_lookback_days=_env_int("GUTWISE_INSIGHTS_LOOKBACK_DAYS", 30, 1),
            batch_max_concurrency=_env_int("GUTWISE_BATCH_MAX_CONCURRENCY", 5, 1),
            remote_timeout_seconds=_env_float("GUTWISE_REMOTE_TIMEOUT_SECONDS", 12.0, 0.001),
            remote_stagger_seconds=_env_float("GUTWISE_REMOTE_STAGGER_SECONDS", 0.1, 0.0),
            remote_analysis=remote,
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini").strip() or "gpt-4o-mini",
            log_level=os.getenv("GUTWISE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            log_json=os.getenv("GUTWISE_LOG_JSON", "false").strip().lower() in _TRUTHY,
        )
