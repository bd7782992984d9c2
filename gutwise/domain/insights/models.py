"""
Insight domain models.

Derived views over correlated meals and check-ins. Nothing here is
persisted; every value is recomputed on each aggregation.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from gutwise.domain.tracking.models import OverallFeeling


class Trend(str, Enum):
    """Week-over-week direction of outcomes."""

    IMPROVING = "improving"
    STABLE = "stable"
    CONCERNING = "concerning"


class InsightKind(str, Enum):
    """Tone of an insight card."""

    POSITIVE = "positive"
    WARNING = "warning"
    TIP = "tip"


def empty_feeling_distribution() -> Dict[str, int]:
    """Zero count for every feeling, in ordinal order."""
    return {feeling.value: 0 for feeling in OverallFeeling}


class FoodSymptomAssociation(BaseModel):
    """
    Outcome counts for one dish.

    Attributes:
        dish_name: Display spelling (first seen)
        positive_count: Positive outcomes
        negative_count: Negative outcomes
        neutral_count: Neutral outcomes
        associated_symptoms: Sample of symptoms seen on negative outcomes
        sample_restaurant: First restaurant the dish was logged at
    """

    model_config = ConfigDict(frozen=True)

    dish_name: str
    positive_count: int = Field(0, ge=0)
    negative_count: int = Field(0, ge=0)
    neutral_count: int = Field(0, ge=0)
    associated_symptoms: Tuple[str, ...] = ()
    sample_restaurant: Optional[str] = None

    @property
    def total_outcomes(self) -> int:
        return self.positive_count + self.negative_count + self.neutral_count


class SymptomStatistic(BaseModel):
    """Frequency and severity of one symptom."""

    model_config = ConfigDict(frozen=True)

    name: str
    count: int = Field(0, ge=0)
    avg_severity: float = Field(0.0, ge=0.0, le=5.0)
    top_foods: Tuple[str, ...] = ()


class InsightCard(BaseModel):
    """Short dashboard insight."""

    model_config = ConfigDict(frozen=True)

    kind: InsightKind
    title: str
    description: str


class InsightsSummary(BaseModel):
    """
    Aggregated insights for a user.

    Attributes:
        total_entries: Number of check-ins considered
        total_meals: Number of meals considered
        safe_ratio_percent: Share of positive check-ins (0-100)
        average_severity: Mean of all usable severities (1 decimal)
        top_safe_foods: Dishes with only positive outcomes
        top_risky_foods: Dishes with negative outcomes
        top_symptoms: Most frequent symptoms
        trend: improving / stable / concerning
        trend_detail: Human-readable explanation of the trend
        feeling_distribution: Check-in count per feeling
        insights: Up to 3 dashboard cards
    """

    model_config = ConfigDict(frozen=True)

    total_entries: int = Field(0, ge=0)
    total_meals: int = Field(0, ge=0)
    safe_ratio_percent: int = Field(0, ge=0, le=100)
    average_severity: float = Field(0.0, ge=0.0, le=5.0)
    top_safe_foods: Tuple[FoodSymptomAssociation, ...] = ()
    top_risky_foods: Tuple[FoodSymptomAssociation, ...] = ()
    top_symptoms: Tuple[SymptomStatistic, ...] = ()
    trend: Trend = Trend.STABLE
    trend_detail: str = ""
    feeling_distribution: Dict[str, int] = Field(default_factory=empty_feeling_distribution)
    insights: Tuple[InsightCard, ...] = ()
