"""
Meal and symptom tracking domain models.

Logged meals, symptom check-ins, and the outcome polarity mapping used
everywhere a check-in is classified as good or bad.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gutwise.domain.shared.value_objects import new_record_id

SEVERITY_MIN = 1
SEVERITY_MAX = 5

_FEELING_SEPARATORS = re.compile(r"[-_\s]+")


class Polarity(str, Enum):
    """Classification of a check-in outcome."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class OverallFeeling(str, Enum):
    """
    Ordinal overall feeling reported in a symptom check-in.

    Best to worst: excellent, great, good, okay, not-good, poor, terrible.
    """

    EXCELLENT = "excellent"
    GREAT = "great"
    GOOD = "good"
    OKAY = "okay"
    NOT_GOOD = "not-good"
    POOR = "poor"
    TERRIBLE = "terrible"

    @property
    def polarity(self) -> Polarity:
        return _POLARITY[self]

    @classmethod
    def parse(cls, value: Any) -> OverallFeeling:
        """
        Parse a feeling, accepting spelling variants.

        Example:
            >>> OverallFeeling.parse("Not Good")
            <OverallFeeling.NOT_GOOD: 'not-good'>

        Raises:
            ValueError: If value is not a known feeling
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Unknown overall feeling: {value!r}")
        folded = _FEELING_SEPARATORS.sub("-", value.strip().lower())
        return cls(folded)


_POLARITY = {
    OverallFeeling.EXCELLENT: Polarity.POSITIVE,
    OverallFeeling.GREAT: Polarity.POSITIVE,
    OverallFeeling.GOOD: Polarity.POSITIVE,
    OverallFeeling.OKAY: Polarity.NEUTRAL,
    OverallFeeling.NOT_GOOD: Polarity.NEGATIVE,
    OverallFeeling.POOR: Polarity.NEGATIVE,
    OverallFeeling.TERRIBLE: Polarity.NEGATIVE,
}


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _record_id(value: Any) -> Any:
    """Store ids arrive as strings or integer keys; both become stripped strings."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _ordered_names(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    names: list[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        item = item.strip()
        if item and item not in names:
            names.append(item)
    return tuple(names)


def coerce_severity(value: Any) -> Optional[int]:
    """
    Return an integral severity in [1, 5], or None if unusable.

    Accepts ints, integral floats and integer strings. Booleans are
    rejected.

    Example:
        >>> coerce_severity("4")
        4
        >>> coerce_severity(2.5) is None
        True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    if SEVERITY_MIN <= number <= SEVERITY_MAX:
        return number
    return None


class MealRecord(BaseModel):
    """
    A logged meal.

    Attributes:
        id: Stable meal identifier (generated when omitted)
        dish_name: Dish eaten
        restaurant_name: Where it was eaten (optional)
        tags: Free-form tags
        meal_timestamp: When the meal was eaten (UTC)
        user_id: Owner (record store scoping)

    Example:
        >>> meal = MealRecord(
        ...     id="meal-001",
        ...     dish_name="Grilled Salmon",
        ...     meal_timestamp=datetime(2024, 5, 1, 12, tzinfo=timezone.utc),
        ... )
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=lambda: new_record_id("meal"),
        min_length=1,
        description="Meal identifier",
    )
    dish_name: str = Field(..., description="Dish name")
    restaurant_name: Optional[str] = Field(None, description="Restaurant name")
    tags: Tuple[str, ...] = Field(default=(), description="Tags")
    meal_timestamp: datetime = Field(..., description="Meal time")
    user_id: Optional[str] = Field(None, description="Owner")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _record_id(v)

    @field_validator("dish_name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("restaurant_name", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v: Any) -> Tuple[str, ...]:
        return _ordered_names(v)

    @field_validator("meal_timestamp")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class SymptomRecord(BaseModel):
    """
    A symptom check-in.

    Severity scores are stored as received; only the entries returned by
    valid_severities() are ever used in statistics.

    Attributes:
        id: Stable check-in identifier (generated when omitted)
        overall_feeling: Ordinal feeling
        specific_symptoms: Reported symptom names
        severity_scores: Raw severity per symptom name
        recorded_timestamp: When the check-in was recorded (UTC)
        linked_meal_id: Explicit reference to a meal (optional)
        notes: Free-text notes
        user_id: Owner (record store scoping)
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=lambda: new_record_id("sym"),
        min_length=1,
        description="Check-in identifier",
    )
    overall_feeling: OverallFeeling = Field(..., description="Overall feeling")
    specific_symptoms: Tuple[str, ...] = Field(default=(), description="Symptoms")
    severity_scores: Dict[str, Any] = Field(default_factory=dict, description="Raw severities")
    recorded_timestamp: datetime = Field(..., description="Check-in time")
    linked_meal_id: Optional[str] = Field(None, description="Linked meal id")
    notes: Optional[str] = Field(None, description="Notes")
    user_id: Optional[str] = Field(None, description="Owner")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _record_id(v)

    @field_validator("overall_feeling", mode="before")
    @classmethod
    def parse_feeling(cls, v: Any) -> OverallFeeling:
        return OverallFeeling.parse(v)

    @field_validator("specific_symptoms", mode="before")
    @classmethod
    def clean_symptoms(cls, v: Any) -> Tuple[str, ...]:
        return _ordered_names(v)

    @field_validator("severity_scores", mode="before")
    @classmethod
    def mapping_or_empty(cls, v: Any) -> Dict[str, Any]:
        if not isinstance(v, dict):
            return {}
        return {str(k): val for k, val in v.items()}

    @field_validator("linked_meal_id", mode="before")
    @classmethod
    def blank_link_to_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("recorded_timestamp")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @property
    def polarity(self) -> Polarity:
        return self.overall_feeling.polarity

    def valid_severities(self) -> Dict[str, int]:
        """Usable severities, restricted to reported symptoms."""
        valid: Dict[str, int] = {}
        for name in self.specific_symptoms:
            if name not in self.severity_scores:
                continue
            severity = coerce_severity(self.severity_scores[name])
            if severity is not None:
                valid[name] = severity
        return valid


class CorrelatedMeal(NamedTuple):
    """A meal paired with its outcome check-in (or None)."""

    meal: MealRecord
    outcome: Optional[SymptomRecord]

    @property
    def is_linked(self) -> bool:
        return self.outcome is not None

    @property
    def polarity(self) -> Optional[Polarity]:
        if self.outcome is None:
            return None
        return self.outcome.polarity
