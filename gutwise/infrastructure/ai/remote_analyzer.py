"""
OpenAI-backed remote dish analyzer.

Adapter implementing IRemoteDishAnalyzer on top of OpenAIClient.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Tuple

import structlog
from openai import OpenAIError
from openai import RateLimitError as OpenAIRateLimitError
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from gutwise.domain.dish.models import (
    AssessmentSource,
    DishInput,
    DishSafetyAssessment,
    clamp_score,
)
from gutwise.domain.profile.models import HealthProfile
from gutwise.domain.shared.errors import (
    RateLimitError,
    RemoteAnalysisError,
    RemoteAnalysisTimeoutError,
)
from gutwise.infrastructure.ai.openai_client import OpenAIClient
from gutwise.infrastructure.ai.prompts import build_dish_messages

logger = structlog.get_logger(__name__)


def _as_list(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value if v is not None and str(v).strip())
    return ()


class RemoteDishEvaluation(BaseModel):
    """
    Lenient view of the model's JSON answer.

    Accepts camelCase or snake_case keys, a string or a list for every
    list field, and numeric strings for the score.

    Example:
        >>> evaluation = RemoteDishEvaluation.model_validate(
        ...     {"safetyScore": "82", "triggers": "garlic", "recommendation": "Ok"}
        ... )
        >>> assert evaluation.safety_score == 82
        >>> assert evaluation.triggers == ("garlic",)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    safety_score: int = Field(
        ...,
        validation_alias=AliasChoices("safetyScore", "safety_score", "score"),
    )
    triggers: Tuple[str, ...] = ()
    safe_aspects: Tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("safeAspects", "safe_aspects"),
    )
    modifications: Tuple[str, ...] = ()
    recommendation: str = Field(
        "",
        validation_alias=AliasChoices("recommendation", "recommendations"),
    )

    @field_validator("safety_score", mode="before")
    @classmethod
    def coerce_score(cls, v: Any) -> int:
        try:
            return clamp_score(v)
        except (TypeError, ValueError) as e:
            raise ValueError(f"safetyScore is not a number: {v!r}") from e

    @field_validator("triggers", "safe_aspects", "modifications", mode="before")
    @classmethod
    def coerce_list(cls, v: Any) -> Tuple[str, ...]:
        return _as_list(v)

    @field_validator("recommendation", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, (list, tuple)):
            return " ".join(str(item) for item in v)
        return str(v)

    def to_assessment(self, dish: DishInput) -> DishSafetyAssessment:
        return DishSafetyAssessment(
            dish_name=dish.name,
            score=self.safety_score,
            triggers=self.triggers,
            safe_aspects=self.safe_aspects,
            modifications=self.modifications,
            recommendation=self.recommendation,
            confidence=self.safety_score,
            source=AssessmentSource.REMOTE,
        )


class OpenAIDishAnalyzer:
    """
    Remote dish analyzer backed by an OpenAI chat model.

    Implements IRemoteDishAnalyzer. Every failure is raised as a
    RemoteAnalysisError so the batch analyzer can fall back.

    Example:
        >>> async with OpenAIDishAnalyzer(OpenAIClient()) as analyzer:
        ...     assessment = await analyzer.try_analyze(dish, profile, timeout=12.0)
    """

    def __init__(self, client: OpenAIClient):
        self.client = client

    async def __aenter__(self) -> OpenAIDishAnalyzer:
        await self.client.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.client.close()

    async def try_analyze(
        self,
        dish: DishInput,
        profile: HealthProfile,
        timeout: Optional[float] = None,
    ) -> DishSafetyAssessment:
        """
        Ask the model to assess one dish.

        Args:
            dish: Dish to analyze
            profile: User health profile
            timeout: Seconds to wait for the answer (None waits for the client timeout)

        Returns:
            DishSafetyAssessment with source=remote

        Raises:
            RemoteAnalysisTimeoutError: If the model does not answer in time
            RateLimitError: If OpenAI rejects the request with HTTP 429
            RemoteAnalysisError: On API failure or malformed answer
        """
        await self.client.open()
        messages = build_dish_messages(dish, profile)

        try:
            data = await asyncio.wait_for(self.client.complete_json(messages), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise RemoteAnalysisTimeoutError(
                f"No response for '{dish.name}' after {timeout}s"
            ) from e
        except OpenAIRateLimitError as e:
            raise RateLimitError(f"OpenAI rate limit hit for '{dish.name}': {e}") from e
        except OpenAIError as e:
            raise RemoteAnalysisError(f"OpenAI API failed: {e}") from e

        try:
            evaluation = RemoteDishEvaluation.model_validate(data)
        except PydanticValidationError as e:
            raise RemoteAnalysisError(
                f"Malformed analysis for '{dish.name}': {e.error_count()} errors"
            ) from e

        logger.debug(
            "Remote dish analysis received",
            dish=dish.name,
            score=evaluation.safety_score,
            triggers=len(evaluation.triggers),
        )
        return evaluation.to_assessment(dish)
