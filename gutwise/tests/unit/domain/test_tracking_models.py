"""
Unit tests for meal and symptom records.
"""

from datetime import datetime, timedelta, timezone

import pytest

from gutwise.domain.tracking.models import (
    CorrelatedMeal,
    MealRecord,
    OverallFeeling,
    Polarity,
    SymptomRecord,
    coerce_severity,
)


class TestPolarity:
    """Test the feeling to polarity mapping."""

    @pytest.mark.parametrize(
        ("feeling", "polarity"),
        [
            (OverallFeeling.EXCELLENT, Polarity.POSITIVE),
            (OverallFeeling.GREAT, Polarity.POSITIVE),
            (OverallFeeling.GOOD, Polarity.POSITIVE),
            (OverallFeeling.OKAY, Polarity.NEUTRAL),
            (OverallFeeling.NOT_GOOD, Polarity.NEGATIVE),
            (OverallFeeling.POOR, Polarity.NEGATIVE),
            (OverallFeeling.TERRIBLE, Polarity.NEGATIVE),
        ],
    )
    def test_mapping(self, feeling: OverallFeeling, polarity: Polarity) -> None:
        """Should classify every feeling."""
        assert feeling.polarity == polarity

    @pytest.mark.parametrize("raw", ["not-good", "Not Good", "NOT_GOOD", " not  good "])
    def test_parse_variants(self, raw: str) -> None:
        """Should accept spelling variants."""
        assert OverallFeeling.parse(raw) == OverallFeeling.NOT_GOOD

    @pytest.mark.parametrize("raw", ["meh", "", None, 3])
    def test_parse_unknown(self, raw: object) -> None:
        """Should reject unknown feelings."""
        with pytest.raises(ValueError):
            OverallFeeling.parse(raw)


class TestCoerceSeverity:
    """Test severity validation."""

    @pytest.mark.parametrize(("raw", "expected"), [(1, 1), (5, 5), (3.0, 3), ("4", 4), (" 2 ", 2)])
    def test_valid(self, raw: object, expected: int) -> None:
        """Should accept integral values in range."""
        assert coerce_severity(raw) == expected

    @pytest.mark.parametrize("raw", [0, 6, -1, 2.5, "high", None, True, float("nan"), [3]])
    def test_invalid(self, raw: object) -> None:
        """Should discard anything else."""
        assert coerce_severity(raw) is None


class TestMealRecord:
    """Test MealRecord model."""

    def test_naive_timestamp_is_utc(self) -> None:
        """Should treat naive timestamps as UTC."""
        meal = MealRecord(id="m1", dish_name="Toast", meal_timestamp=datetime(2024, 5, 1, 8))
        assert meal.meal_timestamp.tzinfo == timezone.utc
        assert meal.meal_timestamp.hour == 8

    def test_aware_timestamp_converted(self) -> None:
        """Should convert other offsets to UTC."""
        tz = timezone(timedelta(hours=2))
        meal = MealRecord(id="m1", dish_name="Toast", meal_timestamp=datetime(2024, 5, 1, 8, tzinfo=tz))
        assert meal.meal_timestamp.hour == 6

    def test_cleans_fields(self) -> None:
        """Should trim names and de-duplicate tags."""
        meal = MealRecord(
            id="m1",
            dish_name="  Pad Thai ",
            restaurant_name="  ",
            tags=["spicy", "spicy", "", "thai"],
            meal_timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
        assert meal.dish_name == "Pad Thai"
        assert meal.restaurant_name is None
        assert meal.tags == ("spicy", "thai")

    def test_requires_id(self) -> None:
        """Should reject an empty id."""
        with pytest.raises(ValueError):
            MealRecord(id="", dish_name="Toast", meal_timestamp=datetime(2024, 5, 1))

    @pytest.mark.parametrize(("raw", "expected"), [(17, "17"), (" m-17 ", "m-17"), ("0", "0")])
    def test_integer_and_padded_ids(self, raw: object, expected: str) -> None:
        """Should store integer keys and padded ids as clean strings."""
        meal = MealRecord(id=raw, dish_name="Toast", meal_timestamp=datetime(2024, 5, 1))
        assert meal.id == expected

    @pytest.mark.parametrize("raw", [True, None, "   ", 1.5])
    def test_rejects_unusable_ids(self, raw: object) -> None:
        with pytest.raises(ValueError):
            MealRecord(id=raw, dish_name="Toast", meal_timestamp=datetime(2024, 5, 1))

    def test_generates_id_when_omitted(self) -> None:
        """Should generate distinct meal ids for new records."""
        first = MealRecord(dish_name="Toast", meal_timestamp=datetime(2024, 5, 1))
        second = MealRecord(dish_name="Toast", meal_timestamp=datetime(2024, 5, 1))

        assert first.id.startswith("meal_")
        assert first.id != second.id


class TestSymptomRecord:
    """Test SymptomRecord model."""

    def test_valid_severities_filtered(self) -> None:
        """Should keep only usable severities of reported symptoms."""
        symptom = SymptomRecord(
            id="s1",
            overall_feeling="poor",
            specific_symptoms=["Bloating", "Cramps", "Nausea", "Gas"],
            severity_scores={
                "Bloating": 3,
                "Cramps": 9,
                "Nausea": "high",
                "Gas": True,
                "Headache": 4,
            },
            recorded_timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
        assert symptom.valid_severities() == {"Bloating": 3}

    def test_non_mapping_severities(self) -> None:
        """Should treat non-mapping severities as empty."""
        symptom = SymptomRecord(
            id="s1",
            overall_feeling="good",
            severity_scores=None,
            recorded_timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
        assert symptom.severity_scores == {}

    def test_blank_link_is_none(self) -> None:
        """Should drop blank meal links."""
        symptom = SymptomRecord(
            id="s1",
            overall_feeling="good",
            linked_meal_id="  ",
            recorded_timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
        assert symptom.linked_meal_id is None

    def test_integer_id_and_generated_default(self) -> None:
        """Should store integer ids as strings and generate missing ones."""
        stored = SymptomRecord(
            id=3,
            overall_feeling="poor",
            linked_meal_id=17,
            recorded_timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
        new = SymptomRecord(
            overall_feeling="poor",
            recorded_timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )

        assert stored.id == "3"
        assert stored.linked_meal_id == "17"
        assert new.id.startswith("sym_")

    def test_rejects_unknown_feeling(self) -> None:
        """Should reject an unknown feeling."""
        with pytest.raises(ValueError):
            SymptomRecord(
                id="s1",
                overall_feeling="meh",
                recorded_timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
            )


def test_correlated_meal_unpacks(make_meal, make_symptom) -> None:
    """Should behave like a (meal, outcome) pair."""
    meal = make_meal("m1")
    outcome = make_symptom("s1", feeling="terrible")

    meal_out, symptom_out = CorrelatedMeal(meal, outcome)
    assert meal_out is meal
    assert symptom_out is outcome
    assert CorrelatedMeal(meal, outcome).polarity == Polarity.NEGATIVE
    assert CorrelatedMeal(meal, None).polarity is None
    assert not CorrelatedMeal(meal, None).is_linked
