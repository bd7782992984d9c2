"""
Dish Batch Analysis Service.

Scores a whole menu with bounded concurrency, delegating to an optional
remote analyzer and falling back to the local rule scorer per dish.

Design Pattern: Service Layer + Dependency Injection + Fallback Strategy
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, List, Optional, Sequence

import structlog
from pydantic import ValidationError as PydanticValidationError

from gutwise.domain.dish.menu import summarize_menu
from gutwise.domain.dish.models import (
    AssessmentSource,
    DishInput,
    DishSafetyAssessment,
    MenuAnalysis,
)
from gutwise.domain.dish.ports import IRemoteDishAnalyzer
from gutwise.domain.dish.scorer import DishSafetyScorer
from gutwise.domain.profile.models import HealthProfile
from gutwise.domain.shared.errors import ScoringError

logger = structlog.get_logger(__name__)

_UNSET: Any = object()


class DishBatchAnalyzer:
    """
    Order-preserving batch scoring of dishes.

    Responsibilities:
    - Score every dish, one assessment per input, in input order
    - Try the remote analyzer first when one is available
    - Stagger remote calls and bound how many run at once
    - Isolate failures: a failed remote call only affects its own dish

    Dependencies (injected):
    - scorer: DishSafetyScorer - local rule engine (always the fallback)
    - remote: IRemoteDishAnalyzer - optional external analyzer

    The analyzer keeps no state between calls.

    Example:
        >>> analyzer = DishBatchAnalyzer(remote=openai_analyzer)
        >>> assessments = await analyzer.analyze_all(
        ...     [DishInput(name="Pad Thai"), DishInput(name="Caesar Salad")],
        ...     HealthProfile(conditions={"IBS"}),
        ... )
        >>> print([a.risk_bucket for a in assessments])
    """

    def __init__(
        self,
        scorer: Optional[DishSafetyScorer] = None,
        remote: Optional[IRemoteDishAnalyzer] = None,
        max_concurrency: int = 5,
        timeout_seconds: float = 12.0,
        stagger_seconds: float = 0.1,
    ):
        """
        Initialize analyzer.

        Args:
            scorer: Local scorer (default rule table if None)
            remote: Default remote analyzer (optional)
            max_concurrency: Max remote calls in flight
            timeout_seconds: Per-dish remote timeout
            stagger_seconds: Extra delay per dish index before its remote call

        Raises:
            ValueError: If a limit is not positive
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if stagger_seconds < 0:
            raise ValueError("stagger_seconds must not be negative")

        self.scorer = scorer or DishSafetyScorer()
        self.remote = remote
        self.max_concurrency = max_concurrency
        self.timeout_seconds = timeout_seconds
        self.stagger_seconds = stagger_seconds

    async def analyze_all(
        self,
        dishes: Sequence[DishInput],
        profile: HealthProfile,
        remote: Optional[IRemoteDishAnalyzer] = _UNSET,
    ) -> List[DishSafetyAssessment]:
        """
        Score every dish.

        Args:
            dishes: Dishes to score
            profile: User health profile
            remote: Remote analyzer for this call (None disables it;
                omitted uses the analyzer's default)

        Returns:
            One assessment per dish, in input order
        """
        if remote is _UNSET:
            remote = self.remote

        if not dishes:
            return []

        if remote is None:
            return [self.scorer.score(dish, profile) for dish in dishes]

        start_time = time.time()
        semaphore = asyncio.Semaphore(self.max_concurrency)
        assessments = await asyncio.gather(
            *(
                self._analyze_one(index, dish, profile, remote, semaphore)
                for index, dish in enumerate(dishes)
            )
        )

        fallbacks = sum(1 for a in assessments if a.is_fallback)
        logger.info(
            "Batch analysis completed",
            dishes=len(dishes),
            remote_ok=len(dishes) - fallbacks,
            fallbacks=fallbacks,
            elapsed_ms=int((time.time() - start_time) * 1000),
        )
        return list(assessments)

    async def analyze_menu(
        self,
        dishes: Sequence[DishInput],
        profile: HealthProfile,
        remote: Optional[IRemoteDishAnalyzer] = _UNSET,
    ) -> MenuAnalysis:
        """
        Score every dish and summarize the menu.

        Example:
            >>> menu = await analyzer.analyze_menu(dishes, profile)
            >>> print(menu.summary.safest_options)
        """
        assessments = await self.analyze_all(dishes, profile, remote=remote)
        return MenuAnalysis(
            assessments=tuple(assessments),
            summary=summarize_menu(assessments, profile),
        )

    async def _analyze_one(
        self,
        index: int,
        dish: DishInput,
        profile: HealthProfile,
        remote: IRemoteDishAnalyzer,
        semaphore: asyncio.Semaphore,
    ) -> DishSafetyAssessment:
        if index and self.stagger_seconds:
            await asyncio.sleep(index * self.stagger_seconds)

        async with semaphore:
            try:
                result = await asyncio.wait_for(
                    remote.try_analyze(dish, profile, self.timeout_seconds),
                    timeout=self.timeout_seconds,
                )
                return _as_assessment(result, dish)
            except asyncio.TimeoutError:
                reason = f"Remote analysis timed out after {self.timeout_seconds}s"
            except Exception as e:
                reason = f"Remote analysis failed: {e}"

        logger.warning(
            "Remote analysis failed, using local scorer",
            dish=dish.name,
            index=index,
            reason=reason,
        )
        local = self.scorer.score(dish, profile)
        return local.model_copy(update={"fallback_reason": reason})


def _as_assessment(result: Any, dish: DishInput) -> DishSafetyAssessment:
    """Validate a remote result into an assessment."""
    if isinstance(result, DishSafetyAssessment):
        assessment = result
    elif isinstance(result, dict):
        payload = {"dish_name": dish.name, "source": AssessmentSource.REMOTE, **result}
        try:
            assessment = DishSafetyAssessment.model_validate(payload)
        except PydanticValidationError as e:
            raise ScoringError(f"Invalid remote payload: {e.error_count()} errors") from e
    else:
        raise ScoringError(
            f"Remote analyzer returned {type(result).__name__}, expected an assessment"
        )

    if not assessment.dish_name:
        assessment = assessment.model_copy(update={"dish_name": dish.name})
    return assessment
