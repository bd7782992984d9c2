"""In-memory record store implementations.

Dictionary-backed adapters for IMealRecordRepository and
ISymptomRecordRepository, used by tests and demos.
"""

from datetime import datetime
from typing import Dict, List

from gutwise.domain.shared.errors import RepositoryError
from gutwise.domain.tracking.models import MealRecord, SymptomRecord, as_utc


class InMemoryMealRecordRepository:
    """
    In-memory implementation of IMealRecordRepository.

    Records are immutable pydantic models, so they are stored and
    returned as-is.

    Thread safety: NOT thread-safe
    Persistence: Data lost on process restart

    Example:
        >>> repository = InMemoryMealRecordRepository()
        >>> await repository.add(meal)
        >>> meals = await repository.list_by_user(meal.user_id)
    """

    def __init__(self) -> None:
        self._storage: Dict[str, MealRecord] = {}

    async def add(self, record: MealRecord) -> None:
        """
        Store a meal.

        Raises:
            RepositoryError: If the meal has no user_id or its id is taken
        """
        if not record.user_id:
            raise RepositoryError(f"Meal {record.id} has no user_id")
        if record.id in self._storage:
            raise RepositoryError(f"Meal {record.id} already stored")
        self._storage[record.id] = record

    async def list_by_user(self, user_id: str) -> List[MealRecord]:
        meals = [m for m in self._storage.values() if m.user_id == user_id]
        meals.sort(key=lambda m: (m.meal_timestamp, m.id))
        return meals

    async def list_by_user_in_range(
        self, user_id: str, start: datetime, end: datetime
    ) -> List[MealRecord]:
        """Meals eaten within [start, end], oldest first."""
        start, end = as_utc(start), as_utc(end)
        return [
            m
            for m in await self.list_by_user(user_id)
            if start <= m.meal_timestamp <= end
        ]

    def count(self) -> int:
        return len(self._storage)


class InMemorySymptomRecordRepository:
    """In-memory implementation of ISymptomRecordRepository."""

    def __init__(self) -> None:
        self._storage: Dict[str, SymptomRecord] = {}

    async def add(self, record: SymptomRecord) -> None:
        """
        Store a check-in.

        Raises:
            RepositoryError: If the check-in has no user_id or its id is taken
        """
        if not record.user_id:
            raise RepositoryError(f"Symptom record {record.id} has no user_id")
        if record.id in self._storage:
            raise RepositoryError(f"Symptom record {record.id} already stored")
        self._storage[record.id] = record

    async def list_by_user(self, user_id: str) -> List[SymptomRecord]:
        symptoms = [s for s in self._storage.values() if s.user_id == user_id]
        symptoms.sort(key=lambda s: (s.recorded_timestamp, s.id))
        return symptoms

    async def list_by_user_in_range(
        self, user_id: str, start: datetime, end: datetime
    ) -> List[SymptomRecord]:
        """Check-ins recorded within [start, end], oldest first."""
        start, end = as_utc(start), as_utc(end)
        return [
            s
            for s in await self.list_by_user(user_id)
            if start <= s.recorded_timestamp <= end
        ]

    def count(self) -> int:
        return len(self._storage)
