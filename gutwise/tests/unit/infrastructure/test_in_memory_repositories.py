"""
Unit tests for in-memory record stores.
"""

from datetime import timedelta

import pytest

from gutwise.domain.shared.errors import RepositoryError
from gutwise.domain.tracking.ports import (
    IMealRecordRepository,
    ISymptomRecordRepository,
)
from gutwise.infrastructure.persistence.in_memory import (
    InMemoryMealRecordRepository,
    InMemorySymptomRecordRepository,
)


class TestInMemoryMealRecordRepository:
    """Test meal store."""

    def test_implements_port(self) -> None:
        assert isinstance(InMemoryMealRecordRepository(), IMealRecordRepository)

    @pytest.mark.asyncio
    async def test_add_and_list_sorted(self, make_meal) -> None:
        """Should list a user's meals oldest first."""
        # ARRANGE
        repository = InMemoryMealRecordRepository()
        await repository.add(make_meal("m2", hours=5))
        await repository.add(make_meal("m1", hours=1))
        await repository.add(make_meal("m3", hours=3, user_id="other"))

        # ACT
        meals = await repository.list_by_user("user123")

        # ASSERT
        assert [m.id for m in meals] == ["m1", "m2"]
        assert repository.count() == 3

    @pytest.mark.asyncio
    async def test_range_bounds_inclusive(self, make_meal, base_time) -> None:
        """Should include meals exactly on the range bounds."""
        repository = InMemoryMealRecordRepository()
        for index, hours in enumerate([0, 2, 4, 6]):
            await repository.add(make_meal(f"m{index}", hours=hours))

        meals = await repository.list_by_user_in_range(
            "user123", base_time + timedelta(hours=2), base_time + timedelta(hours=4)
        )

        assert [m.id for m in meals] == ["m1", "m2"]

    @pytest.mark.asyncio
    async def test_range_accepts_naive_bounds(self, make_meal, base_time) -> None:
        """Naive range bounds are read as UTC."""
        repository = InMemoryMealRecordRepository()
        await repository.add(make_meal("m1"))

        naive = base_time.replace(tzinfo=None)
        meals = await repository.list_by_user_in_range("user123", naive, naive)

        assert [m.id for m in meals] == ["m1"]

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, make_meal) -> None:
        repository = InMemoryMealRecordRepository()
        await repository.add(make_meal("m1"))

        with pytest.raises(RepositoryError, match="already stored"):
            await repository.add(make_meal("m1", hours=1))

    @pytest.mark.asyncio
    async def test_missing_owner_rejected(self, make_meal) -> None:
        repository = InMemoryMealRecordRepository()

        with pytest.raises(RepositoryError, match="no user_id"):
            await repository.add(make_meal("m1", user_id=None))


class TestInMemorySymptomRecordRepository:
    """Test check-in store."""

    def test_implements_port(self) -> None:
        assert isinstance(InMemorySymptomRecordRepository(), ISymptomRecordRepository)

    @pytest.mark.asyncio
    async def test_add_and_range(self, make_symptom, base_time) -> None:
        """Should filter by owner and range, oldest first."""
        repository = InMemorySymptomRecordRepository()
        await repository.add(make_symptom("s3", hours=30))
        await repository.add(make_symptom("s2", hours=10))
        await repository.add(make_symptom("s1", hours=1))
        await repository.add(make_symptom("x1", hours=2, user_id="other"))

        symptoms = await repository.list_by_user_in_range(
            "user123", base_time, base_time + timedelta(hours=24)
        )

        assert [s.id for s in symptoms] == ["s1", "s2"]
        assert [s.id for s in await repository.list_by_user("other")] == ["x1"]

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, make_symptom) -> None:
        repository = InMemorySymptomRecordRepository()
        await repository.add(make_symptom("s1"))

        with pytest.raises(RepositoryError):
            await repository.add(make_symptom("s1"))
