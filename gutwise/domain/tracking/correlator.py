"""
Meal-symptom correlator.

Links logged meals to the symptom check-ins that plausibly describe
their outcome.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Set, Tuple

import structlog

from gutwise.domain.shared.errors import CorrelationError
from gutwise.domain.tracking.models import CorrelatedMeal, MealRecord, SymptomRecord

logger = structlog.get_logger(__name__)

DEFAULT_WINDOW = timedelta(hours=6)


class MealSymptomCorrelator:
    """
    Pairs each meal with at most one outcome check-in.

    Matching order per meal:
    1. Explicit link: the latest check-in whose linked_meal_id is the
       meal's id (ties broken by the larger check-in id).
    2. Time window: a check-in recorded within [meal, meal + window].
       Window pairs are assigned nearest-first across all meals, so a
       check-in serves at most one meal through the window, and a
       check-in explicitly linked to a meal in the input is never
       reused by the window.
    3. Otherwise no outcome.

    Example:
        >>> correlator = MealSymptomCorrelator()
        >>> pairs = correlator.correlate(meals, symptoms)
        >>> for meal, outcome in pairs:
        ...     print(meal.dish_name, outcome.overall_feeling if outcome else None)
    """

    def __init__(self, window: timedelta = DEFAULT_WINDOW):
        """
        Initialize correlator.

        Args:
            window: Default correlation window (must not be negative)

        Raises:
            CorrelationError: If window is negative
        """
        _check_window(window)
        self.window = window

    def correlate(
        self,
        meals: Optional[Iterable[MealRecord]],
        symptoms: Optional[Iterable[SymptomRecord]],
        window: Optional[timedelta] = None,
    ) -> List[CorrelatedMeal]:
        """
        Correlate meals with check-ins.

        Args:
            meals: Logged meals (any order)
            symptoms: Symptom check-ins (any order)
            window: Override for the correlation window

        Returns:
            One CorrelatedMeal per meal, in input meal order

        Raises:
            CorrelationError: If window is negative
        """
        if window is None:
            window = self.window
        _check_window(window)

        meal_list = list(meals or ())
        symptom_list = list(symptoms or ())
        if not meal_list:
            return []

        outcomes = self._explicit_links(meal_list, symptom_list)
        meal_ids = {meal.id for meal in meal_list}

        window_candidates = [
            s
            for s in symptom_list
            if s.linked_meal_id is None or s.linked_meal_id not in meal_ids
        ]
        outcomes.update(
            self._window_matches(
                [m for m in meal_list if m.id not in outcomes],
                window_candidates,
                window,
            )
        )

        pairs = [CorrelatedMeal(meal, outcomes.get(meal.id)) for meal in meal_list]
        logger.debug(
            "Meals correlated",
            meals=len(meal_list),
            symptoms=len(symptom_list),
            linked=sum(1 for p in pairs if p.is_linked),
            window_hours=window.total_seconds() / 3600,
        )
        return pairs

    @staticmethod
    def _explicit_links(
        meals: List[MealRecord], symptoms: List[SymptomRecord]
    ) -> Dict[str, SymptomRecord]:
        by_meal: Dict[str, SymptomRecord] = {}
        for symptom in symptoms:
            if symptom.linked_meal_id is None:
                continue
            current = by_meal.get(symptom.linked_meal_id)
            if current is None or (symptom.recorded_timestamp, symptom.id) > (
                current.recorded_timestamp,
                current.id,
            ):
                by_meal[symptom.linked_meal_id] = symptom
        return {meal.id: by_meal[meal.id] for meal in meals if meal.id in by_meal}

    @staticmethod
    def _window_matches(
        meals: List[MealRecord],
        symptoms: List[SymptomRecord],
        window: timedelta,
    ) -> Dict[str, SymptomRecord]:
        candidates: List[Tuple[timedelta, MealRecord, SymptomRecord]] = []
        for meal in meals:
            for symptom in symptoms:
                delta = symptom.recorded_timestamp - meal.meal_timestamp
                if timedelta(0) <= delta <= window:
                    candidates.append((delta, meal, symptom))

        candidates.sort(key=lambda c: (c[0], c[1].meal_timestamp, c[1].id, c[2].id))

        matched: Dict[str, SymptomRecord] = {}
        used: Set[str] = set()
        for _, meal, symptom in candidates:
            if meal.id in matched or symptom.id in used:
                continue
            matched[meal.id] = symptom
            used.add(symptom.id)
        return matched


def _check_window(window: timedelta) -> None:
    if window < timedelta(0):
        raise CorrelationError(f"Correlation window must not be negative, got {window}")
