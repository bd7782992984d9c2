"""
Health profile domain models.

The immutable per-request user context consumed by the dish scorer.
"""

from __future__ import annotations

import re
from typing import Any, FrozenSet, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SEPARATORS = re.compile(r"[-_\s]+")


def normalize_label(value: str) -> str:
    """
    Fold a condition/restriction label for comparison.

    Lower-cases and collapses hyphens, underscores and whitespace runs
    into single spaces.

    Example:
        >>> normalize_label("Gluten-free")
        'gluten free'
        >>> normalize_label("  LOW_FODMAP ")
        'low fodmap'
    """
    return _SEPARATORS.sub(" ", value.strip().lower()).strip()


def _clean_labels(value: Any) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    labels = set()
    for item in value:
        if not isinstance(item, str):
            continue
        item = item.strip()
        if item:
            labels.add(item)
    return frozenset(labels)


class HealthProfile(BaseModel):
    """
    User digestive health context.

    Attributes:
        conditions: Free-form condition names (e.g. "IBS", "GERD")
        dietary_restrictions: Restriction names (e.g. "Gluten-free")

    Example:
        >>> profile = HealthProfile(
        ...     conditions={"IBS", "Lactose Intolerance"},
        ...     dietary_restrictions={"Low FODMAP"},
        ... )
        >>> assert profile.has_condition("lactose")
        >>> assert profile.has_restriction("low fodmap")
    """

    model_config = ConfigDict(frozen=True)

    conditions: FrozenSet[str] = Field(default_factory=frozenset, description="Health conditions")
    dietary_restrictions: FrozenSet[str] = Field(
        default_factory=frozenset, description="Dietary restrictions"
    )

    @field_validator("conditions", "dietary_restrictions", mode="before")
    @classmethod
    def clean(cls, v: Any) -> FrozenSet[str]:
        """Drop blanks and non-string entries."""
        return _clean_labels(v)

    def has_condition(self, *needles: str) -> bool:
        """True if any condition contains any of the needles."""
        return _contains_any(self.conditions, needles)

    def has_restriction(self, *needles: str) -> bool:
        """True if any dietary restriction contains any of the needles."""
        return _contains_any(self.dietary_restrictions, needles)

    def sorted_conditions(self) -> list[str]:
        """Conditions in a stable display order."""
        return sorted(self.conditions, key=lambda c: (c.lower(), c))

    @property
    def is_empty(self) -> bool:
        return not self.conditions and not self.dietary_restrictions


def _contains_any(labels: Iterable[str], needles: Iterable[str]) -> bool:
    folded = [normalize_label(label) for label in labels]
    for needle in needles:
        n = normalize_label(needle)
        if any(n in label for label in folded):
            return True
    return False


class HealthProfileResolver:
    """
    Builds a HealthProfile from loosely-typed stored preferences.

    Accepts None, iterables, or comma-separated strings.

    Example:
        >>> resolver = HealthProfileResolver()
        >>> profile = resolver.resolve("IBS, GERD", ["Dairy-free", None, ""])
        >>> assert profile.conditions == frozenset({"IBS", "GERD"})
        >>> assert profile.dietary_restrictions == frozenset({"Dairy-free"})
    """

    def resolve(
        self,
        conditions: Optional[Union[str, Iterable[Any]]] = None,
        dietary_restrictions: Optional[Union[str, Iterable[Any]]] = None,
    ) -> HealthProfile:
        return HealthProfile(
            conditions=_clean_labels(conditions),
            dietary_restrictions=_clean_labels(dietary_restrictions),
        )
