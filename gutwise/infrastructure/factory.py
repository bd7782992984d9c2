"""Service factory.

Settings-based wiring of the engine services.
Strategy:
- GUTWISE_REMOTE_ANALYSIS=openai + OPENAI_API_KEY: remote analysis via OpenAI
- Default: local rule scorer only (safe fallback if env vars not set)

Usage:
    from gutwise.infrastructure.factory import bootstrap, create_batch_analyzer

    settings = bootstrap()
    analyzer = create_batch_analyzer(settings)
"""

from typing import Optional

import structlog

from gutwise.application.dish.batch_analyzer import DishBatchAnalyzer
from gutwise.application.insights.service import InsightsService
from gutwise.config import REMOTE_OPENAI, EngineSettings
from gutwise.domain.dish.ports import IRemoteDishAnalyzer
from gutwise.domain.tracking.correlator import MealSymptomCorrelator
from gutwise.domain.tracking.ports import (
    IMealRecordRepository,
    ISymptomRecordRepository,
)
from gutwise.infrastructure.ai.openai_client import OpenAIClient
from gutwise.infrastructure.ai.remote_analyzer import OpenAIDishAnalyzer
from gutwise.infrastructure.log_config import configure_logging
from gutwise.infrastructure.persistence.in_memory import (
    InMemoryMealRecordRepository,
    InMemorySymptomRecordRepository,
)

logger = structlog.get_logger(__name__)


def bootstrap(settings: Optional[EngineSettings] = None) -> EngineSettings:
    """Load settings (from the environment unless given) and configure logging."""
    if settings is None:
        settings = EngineSettings.from_env()
    configure_logging(settings.log_level, json=settings.log_json)
    return settings


def create_remote_analyzer(settings: EngineSettings) -> Optional[IRemoteDishAnalyzer]:
    """Create the remote analyzer selected by settings.

    Returns:
        OpenAIDishAnalyzer, or None when remote analysis is disabled or
        no API key is configured
    """
    if settings.remote_analysis != REMOTE_OPENAI:
        return None

    if not settings.openai_api_key:
        logger.warning("GUTWISE_REMOTE_ANALYSIS=openai but OPENAI_API_KEY not set, using local scorer")
        return None

    client = OpenAIClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout=settings.remote_timeout_seconds,
    )
    logger.info("Remote dish analysis enabled", provider="openai", model=settings.openai_model)
    return OpenAIDishAnalyzer(client)


def create_batch_analyzer(settings: EngineSettings) -> DishBatchAnalyzer:
    """Create a batch analyzer with the configured remote analyzer and limits."""
    return DishBatchAnalyzer(
        remote=create_remote_analyzer(settings),
        max_concurrency=settings.batch_max_concurrency,
        timeout_seconds=settings.remote_timeout_seconds,
        stagger_seconds=settings.remote_stagger_seconds,
    )


def create_insights_service(
    settings: EngineSettings,
    meal_repository: Optional[IMealRecordRepository] = None,
    symptom_repository: Optional[ISymptomRecordRepository] = None,
) -> InsightsService:
    """Create the insights service (in-memory stores unless given)."""
    if meal_repository is None:
        meal_repository = InMemoryMealRecordRepository()
    if symptom_repository is None:
        symptom_repository = InMemorySymptomRecordRepository()
    return InsightsService(
        meal_repository=meal_repository,
        symptom_repository=symptom_repository,
        correlator=MealSymptomCorrelator(window=settings.correlation_window),
        lookback_days=settings.insights_lookback_days,
    )
