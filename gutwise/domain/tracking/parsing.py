"""
Raw record mapper.

Transforms loosely-typed record store rows into tracking domain models.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from gutwise.domain.shared.errors import ValidationError
from gutwise.domain.tracking.models import MealRecord, SymptomRecord

logger = structlog.get_logger(__name__)


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None


class TrackingRecordMapper:
    """Maps record store rows to MealRecord / SymptomRecord."""

    @staticmethod
    def to_meal(row: Mapping[str, Any]) -> MealRecord:
        """Parse one meal row.

        Accepts both snake_case store columns (``meal_time``) and the
        domain field names (``meal_timestamp``).

        Raises:
            ValidationError: If the row cannot become a MealRecord

        Example:
            >>> meal = TrackingRecordMapper.to_meal(
            ...     {
            ...         "id": "meal-001",
            ...         "dish_name": "Grilled Salmon",
            ...         "restaurant_name": "Ocean Grill",
            ...         "meal_time": "2024-05-01T12:30:00Z",
            ...         "tags": ["healthy"],
            ...     }
            ... )
            >>> assert meal.dish_name == "Grilled Salmon"
        """
        try:
            return MealRecord(
                id=_first(row, "id", "meal_id"),
                dish_name=_first(row, "dish_name", "dishName") or "",
                restaurant_name=_first(row, "restaurant_name", "restaurantName"),
                tags=_first(row, "tags"),
                meal_timestamp=_first(row, "meal_timestamp", "meal_time", "mealTime"),
                user_id=_first(row, "user_id", "userId"),
            )
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid meal row {row.get('id')!r}: {e.error_count()} errors"
            ) from e

    @staticmethod
    def to_symptom(row: Mapping[str, Any]) -> SymptomRecord:
        """Parse one symptom check-in row.

        Raises:
            ValidationError: If the row cannot become a SymptomRecord

        Example:
            >>> symptom = TrackingRecordMapper.to_symptom(
            ...     {
            ...         "id": "sym-001",
            ...         "overall_feeling": "not-good",
            ...         "symptoms": ["Bloating"],
            ...         "severity_scores": {"Bloating": 3},
            ...         "recorded_at": "2024-05-01T15:00:00Z",
            ...         "meal_id": "meal-001",
            ...     }
            ... )
            >>> assert symptom.linked_meal_id == "meal-001"
        """
        try:
            return SymptomRecord(
                id=_first(row, "id"),
                overall_feeling=_first(row, "overall_feeling", "overallFeeling"),
                specific_symptoms=_first(row, "specific_symptoms", "symptoms"),
                severity_scores=_first(row, "severity_scores", "severityScores"),
                recorded_timestamp=_first(
                    row, "recorded_timestamp", "recorded_at", "recordedAt"
                ),
                linked_meal_id=_first(row, "linked_meal_id", "meal_id", "mealId"),
                notes=_first(row, "notes"),
                user_id=_first(row, "user_id", "userId"),
            )
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid symptom row {row.get('id')!r}: {e.error_count()} errors"
            ) from e


def parse_meal_records(rows: Optional[Iterable[Mapping[str, Any]]]) -> List[MealRecord]:
    """
    Parse meal rows, skipping the ones that cannot be parsed.

    Args:
        rows: Raw rows from the record store (None is treated as empty)

    Returns:
        Parsed meals in input order
    """
    meals: List[MealRecord] = []
    for index, row in enumerate(rows or ()):
        if not isinstance(row, Mapping):
            logger.debug("Skipping non-mapping meal row", index=index)
            continue
        try:
            meals.append(TrackingRecordMapper.to_meal(row))
        except ValidationError as e:
            logger.debug("Skipping unparseable meal row", index=index, error=str(e))
    return meals


def parse_symptom_records(
    rows: Optional[Iterable[Mapping[str, Any]]],
) -> List[SymptomRecord]:
    """
    Parse symptom rows, skipping the ones that cannot be parsed.

    Rows with an unknown feeling, a missing id or a bad timestamp are
    dropped rather than failing the whole batch.
    """
    symptoms: List[SymptomRecord] = []
    for index, row in enumerate(rows or ()):
        if not isinstance(row, Mapping):
            logger.debug("Skipping non-mapping symptom row", index=index)
            continue
        try:
            symptoms.append(TrackingRecordMapper.to_symptom(row))
        except ValidationError as e:
            logger.debug("Skipping unparseable symptom row", index=index, error=str(e))
    return symptoms
