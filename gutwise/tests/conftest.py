"""
Shared fixtures for GutWise tests.

Reusable domain objects and record builders.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, Optional
from unittest.mock import AsyncMock

import pytest

from gutwise.domain.dish.models import DishInput
from gutwise.domain.dish.ports import IRemoteDishAnalyzer
from gutwise.domain.dish.scorer import DishSafetyScorer
from gutwise.domain.profile.models import HealthProfile
from gutwise.domain.tracking.models import MealRecord, SymptomRecord


# ═══════════════════════════════════════════════════════════
# DOMAIN MODEL FIXTURES
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def base_time() -> datetime:
    """Fixed reference instant (UTC)."""
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def empty_profile() -> HealthProfile:
    """Profile with no conditions or restrictions."""
    return HealthProfile()


@pytest.fixture
def low_fodmap_profile() -> HealthProfile:
    """Profile following a low FODMAP diet."""
    return HealthProfile(dietary_restrictions={"Low FODMAP"})


@pytest.fixture
def sensitive_profile() -> HealthProfile:
    """Profile with IBS and lactose intolerance, gluten-free diet."""
    return HealthProfile(
        conditions={"IBS", "Lactose Intolerance"},
        dietary_restrictions={"Gluten-free"},
    )


@pytest.fixture
def scorer() -> DishSafetyScorer:
    """Deterministic scorer with the default rule table."""
    return DishSafetyScorer()


@pytest.fixture
def sample_menu() -> list[DishInput]:
    """Small menu with one safe, one caution and one risky dish."""
    return [
        DishInput(name="Grilled Salmon", description="salmon, quinoa, steamed greens"),
        DishInput(name="Margherita", description="tomato, basil"),
        DishInput(name="Deep-Fried Onion Rings", description="onion, batter, fried"),
    ]


# ═══════════════════════════════════════════════════════════
# RECORD BUILDERS
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def make_meal(base_time: datetime) -> Callable[..., MealRecord]:
    """Build a MealRecord at base_time + offset hours."""

    def _make(
        meal_id: str,
        dish_name: str = "Grilled Salmon",
        hours: float = 0.0,
        restaurant_name: Optional[str] = None,
        user_id: Optional[str] = "user123",
    ) -> MealRecord:
        return MealRecord(
            id=meal_id,
            dish_name=dish_name,
            restaurant_name=restaurant_name,
            meal_timestamp=base_time + timedelta(hours=hours),
            user_id=user_id,
        )

    return _make


@pytest.fixture
def make_symptom(base_time: datetime) -> Callable[..., SymptomRecord]:
    """Build a SymptomRecord at base_time + offset hours."""

    def _make(
        symptom_id: str,
        feeling: str = "good",
        hours: float = 0.0,
        symptoms: Iterable[str] = (),
        severities: Optional[Dict[str, Any]] = None,
        linked_meal_id: Optional[str] = None,
        user_id: Optional[str] = "user123",
    ) -> SymptomRecord:
        return SymptomRecord(
            id=symptom_id,
            overall_feeling=feeling,
            specific_symptoms=tuple(symptoms),
            severity_scores=severities or {},
            recorded_timestamp=base_time + timedelta(hours=hours),
            linked_meal_id=linked_meal_id,
            user_id=user_id,
        )

    return _make


# ═══════════════════════════════════════════════════════════
# PORT MOCKS
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def mock_remote() -> Any:
    """Mock remote dish analyzer (interface-based)."""
    return AsyncMock(spec=IRemoteDishAnalyzer)
