"""
Insights Service.

Fetches a user's recent meals and check-ins from the record stores,
correlates them and aggregates the dashboard summary.

Design Pattern: Service Layer + Dependency Injection
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from gutwise.domain.insights.aggregator import InsightAggregator
from gutwise.domain.insights.models import InsightsSummary
from gutwise.domain.shared.value_objects import UserId
from gutwise.domain.tracking.correlator import MealSymptomCorrelator
from gutwise.domain.tracking.models import as_utc
from gutwise.domain.tracking.ports import (
    IMealRecordRepository,
    ISymptomRecordRepository,
)

logger = structlog.get_logger(__name__)


class InsightsService:
    """
    Builds the insights summary for a user.

    Dependencies (injected via Ports/Interfaces):
    - meal_repository: IMealRecordRepository
    - symptom_repository: ISymptomRecordRepository
    - correlator: MealSymptomCorrelator (default 6h window)
    - aggregator: InsightAggregator

    Only the lookback period is fetched. Meals are fetched from one
    correlation window earlier, so a check-in at the start of the period
    can still be matched to the meal that caused it. Those extra meals
    are only used for matching and do not count as period meals.

    Example:
        >>> service = InsightsService(
        ...     meal_repository=InMemoryMealRecordRepository(),
        ...     symptom_repository=InMemorySymptomRecordRepository(),
        ... )
        >>> summary = await service.get_insights(UserId(value="user123"))
        >>> print(summary.trend)
    """

    def __init__(
        self,
        meal_repository: IMealRecordRepository,
        symptom_repository: ISymptomRecordRepository,
        correlator: Optional[MealSymptomCorrelator] = None,
        aggregator: Optional[InsightAggregator] = None,
        lookback_days: int = 30,
    ):
        """
        Initialize service with dependencies.

        Args:
            meal_repository: Meal record store
            symptom_repository: Check-in record store
            correlator: Meal-symptom correlator
            aggregator: Insight aggregator
            lookback_days: How many days of history to summarize

        Raises:
            ValueError: If lookback_days is not positive
        """
        if lookback_days < 1:
            raise ValueError("lookback_days must be at least 1")
        self.meal_repository = meal_repository
        self.symptom_repository = symptom_repository
        self.correlator = correlator or MealSymptomCorrelator()
        self.aggregator = aggregator or InsightAggregator()
        self.lookback_days = lookback_days

    async def get_insights(
        self,
        user_id: UserId,
        now: Optional[datetime] = None,
    ) -> InsightsSummary:
        """
        Summarize the user's lookback period.

        Args:
            user_id: User to summarize
            now: End of the period (defaults to current UTC time)

        Returns:
            InsightsSummary for the period
        """
        start_time = time.time()
        end = as_utc(now) if now else datetime.now(timezone.utc)
        start = end - timedelta(days=self.lookback_days)

        meals = await self.meal_repository.list_by_user_in_range(
            str(user_id), start - self.correlator.window, end
        )
        symptoms = await self.symptom_repository.list_by_user_in_range(
            str(user_id), start, end
        )

        correlated = [
            pair
            for pair in self.correlator.correlate(meals, symptoms)
            if pair.meal.meal_timestamp >= start
        ]
        summary = self.aggregator.summarize(correlated, symptoms)

        logger.info(
            "Insights generated",
            user_id=str(user_id),
            meals=len(correlated),
            check_ins=len(symptoms),
            trend=summary.trend.value,
            elapsed_ms=int((time.time() - start_time) * 1000),
        )
        return summary
