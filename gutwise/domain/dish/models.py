"""
Dish safety domain models.

Input dish descriptions and the scored assessments produced for them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Canonical bucket thresholds, shared by every surface that classifies a score.
SAFE_THRESHOLD = 85
CAUTION_THRESHOLD = 65

SCORE_MIN = 0
SCORE_MAX = 100


class RiskBucket(str, Enum):
    """Three-way classification of a dish safety score."""

    SAFE = "safe"
    CAUTION = "caution"
    AVOID = "avoid"


class AssessmentSource(str, Enum):
    """Which engine produced an assessment."""

    LOCAL_RULES = "local_rules"
    REMOTE = "remote"


def clamp_score(value: Any) -> int:
    """
    Coerce a number into the [0, 100] integer range.

    Non-numeric values raise ValueError (callers validate upstream).

    Example:
        >>> clamp_score(120)
        100
        >>> clamp_score(-3.6)
        0
        >>> clamp_score("71.5")
        72
    """
    if isinstance(value, bool):
        raise ValueError("Score must be numeric, got bool")
    number = float(value)
    if number != number:  # NaN
        raise ValueError("Score must be a number, got NaN")
    number = max(float(SCORE_MIN), min(float(SCORE_MAX), number))
    return int(number + 0.5)


def bucket_for_score(score: int) -> RiskBucket:
    """
    Map a score to its risk bucket.

    score >= 85 → safe, 65 <= score < 85 → caution, score < 65 → avoid.

    Example:
        >>> bucket_for_score(85)
        <RiskBucket.SAFE: 'safe'>
        >>> bucket_for_score(64)
        <RiskBucket.AVOID: 'avoid'>
    """
    if score >= SAFE_THRESHOLD:
        return RiskBucket.SAFE
    if score >= CAUTION_THRESHOLD:
        return RiskBucket.CAUTION
    return RiskBucket.AVOID


def _ordered_unique(values: Any) -> Tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    seen: list[str] = []
    for item in values:
        if item is None:
            continue
        text = str(item).strip()
        if text and text not in seen:
            seen.append(text)
    return tuple(seen)


class DishInput(BaseModel):
    """
    A dish to score.

    Attributes:
        name: Display name (e.g. "Deep-Fried Onion Rings")
        description: Free-text description or ingredient list

    Example:
        >>> dish = DishInput(name="Grilled Salmon", description="salmon, lemon, herbs")
        >>> assert "salmon" in dish.text
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field("", description="Dish display name")
    description: str = Field("", description="Description or ingredients")

    @field_validator("name", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        """Treat missing text as empty."""
        if v is None:
            return ""
        return str(v)

    @property
    def text(self) -> str:
        """Lower-cased text scanned for keywords."""
        return f"{self.name} {self.description}".lower().strip()


class DishSafetyAssessment(BaseModel):
    """
    Scored digestive-safety assessment for one dish.

    The risk bucket is always derived from the (clamped) score, whatever
    value the caller supplies, so remote and local results agree.

    Attributes:
        dish_name: Name of the assessed dish
        score: Safety score (0-100, higher is safer)
        risk_bucket: safe / caution / avoid
        triggers: Reasons the score was lowered
        safe_aspects: Reasons the score was raised
        modifications: Ordering suggestions that reduce risk
        recommendation: Human-readable advice
        confidence: Confidence (0-100)
        source: Engine that produced the assessment
        fallback_reason: Why the remote result was not used (if any)

    Example:
        >>> assessment = DishSafetyAssessment(
        ...     dish_name="Onion Rings",
        ...     score=40,
        ...     triggers=("High fat content from frying",),
        ...     recommendation="Onion Rings may be challenging.",
        ...     confidence=40,
        ... )
        >>> assert assessment.risk_bucket == RiskBucket.AVOID
    """

    model_config = ConfigDict(frozen=True)

    dish_name: str = Field("", description="Assessed dish name")
    score: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX, description="Safety score")
    risk_bucket: RiskBucket = Field(RiskBucket.CAUTION, description="Derived from score")
    triggers: Tuple[str, ...] = Field(default=(), description="Risk reasons")
    safe_aspects: Tuple[str, ...] = Field(default=(), description="Safety reasons")
    modifications: Tuple[str, ...] = Field(default=(), description="Suggested modifications")
    recommendation: str = Field("", description="Recommendation text")
    confidence: int = Field(0, ge=SCORE_MIN, le=SCORE_MAX, description="Confidence")
    source: AssessmentSource = Field(AssessmentSource.LOCAL_RULES, description="Producer")
    fallback_reason: Optional[str] = Field(None, description="Remote failure, if any")

    @model_validator(mode="before")
    @classmethod
    def derive_bucket(cls, data: Any) -> Any:
        """Clamp score/confidence and recompute the bucket."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "score" in data:
            data["score"] = clamp_score(data["score"])
            data["risk_bucket"] = bucket_for_score(data["score"])
        if data.get("confidence") is not None:
            data["confidence"] = clamp_score(data["confidence"])
        else:
            data.pop("confidence", None)
        return data

    @field_validator("triggers", "safe_aspects", "modifications", mode="before")
    @classmethod
    def ordered_set(cls, v: Any) -> Tuple[str, ...]:
        """De-duplicate while preserving order."""
        return _ordered_unique(v)

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None


class MenuSummary(BaseModel):
    """
    Menu-level digest of a batch of assessments.

    Attributes:
        total_dishes: Number of assessed dishes
        average_score: Rounded mean score (0 when empty)
        safest_options: Up to 3 safe dishes, best first
        riskiest_options: Up to 3 dishes to avoid, worst first
        overall_recommendation: Advice for the whole menu
    """

    model_config = ConfigDict(frozen=True)

    total_dishes: int = Field(0, ge=0)
    average_score: int = Field(0, ge=SCORE_MIN, le=SCORE_MAX)
    safest_options: Tuple[str, ...] = ()
    riskiest_options: Tuple[str, ...] = ()
    overall_recommendation: str = ""


class MenuAnalysis(BaseModel):
    """Assessments for a whole menu plus its summary."""

    model_config = ConfigDict(frozen=True)

    assessments: Tuple[DishSafetyAssessment, ...] = ()
    summary: MenuSummary = Field(default_factory=MenuSummary)
