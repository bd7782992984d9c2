"""
Record store interfaces.

Protocols for the meal and symptom record stores. The engine only needs
create, list-by-user and list-by-time-range.
"""

from datetime import datetime
from typing import List, Protocol, runtime_checkable

from gutwise.domain.tracking.models import MealRecord, SymptomRecord


@runtime_checkable
class IMealRecordRepository(Protocol):
    """
    Repository interface for logged meals.

    Design Pattern: Repository Pattern + Protocol (Dependency Injection)

    Example:
        >>> repository = InMemoryMealRecordRepository()
        >>> await repository.add(meal)
        >>> meals = await repository.list_by_user("user123")
    """

    async def add(self, record: MealRecord) -> None:
        """
        Store a new meal record.

        Raises:
            RepositoryError: If the record has no owner or is already stored
        """
        ...

    async def list_by_user(self, user_id: str) -> List[MealRecord]:
        """All meals of a user, oldest first."""
        ...

    async def list_by_user_in_range(
        self, user_id: str, start: datetime, end: datetime
    ) -> List[MealRecord]:
        """
        Meals of a user eaten within [start, end].

        Args:
            user_id: Owner
            start: Range start (inclusive)
            end: Range end (inclusive)

        Returns:
            Meals ordered by meal_timestamp ascending
        """
        ...


@runtime_checkable
class ISymptomRecordRepository(Protocol):
    """Repository interface for symptom check-ins."""

    async def add(self, record: SymptomRecord) -> None:
        """
        Store a new check-in.

        Raises:
            RepositoryError: If the record has no owner or is already stored
        """
        ...

    async def list_by_user(self, user_id: str) -> List[SymptomRecord]:
        """All check-ins of a user, oldest first."""
        ...

    async def list_by_user_in_range(
        self, user_id: str, start: datetime, end: datetime
    ) -> List[SymptomRecord]:
        """Check-ins of a user recorded within [start, end], oldest first."""
        ...
