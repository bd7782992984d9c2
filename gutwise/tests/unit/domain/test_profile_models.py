"""
Unit tests for health profile models.
"""

import pytest

from gutwise.domain.profile.models import (
    HealthProfile,
    HealthProfileResolver,
    normalize_label,
)


class TestNormalizeLabel:
    """Test label folding."""

    @pytest.mark.parametrize(
        "raw",
        ["Gluten-free", "gluten free", "GLUTEN_FREE", "  gluten -  free "],
    )
    def test_spellings_fold_together(self, raw: str) -> None:
        """Should fold separators and case."""
        assert normalize_label(raw) == "gluten free"


class TestHealthProfile:
    """Test HealthProfile model."""

    def test_defaults_empty(self) -> None:
        """Should default to empty sets."""
        profile = HealthProfile()
        assert profile.conditions == frozenset()
        assert profile.dietary_restrictions == frozenset()
        assert profile.is_empty

    def test_cleans_labels(self) -> None:
        """Should drop blanks and non-strings."""
        profile = HealthProfile(conditions=["IBS", "", "  ", None, 3, " GERD "])
        assert profile.conditions == frozenset({"IBS", "GERD"})

    def test_has_condition_case_insensitive(self) -> None:
        """Should match conditions by substring, ignoring case."""
        profile = HealthProfile(conditions={"Lactose Intolerance"})
        assert profile.has_condition("lactose")
        assert not profile.has_condition("celiac")

    def test_has_restriction_separator_insensitive(self) -> None:
        """Should match restrictions regardless of hyphen or underscore."""
        profile = HealthProfile(dietary_restrictions={"Dairy-free"})
        assert profile.has_restriction("dairy free")
        assert profile.has_restriction("DAIRY_FREE")

    def test_sorted_conditions(self) -> None:
        """Should sort case-insensitively."""
        profile = HealthProfile(conditions={"ibs", "GERD", "Celiac"})
        assert profile.sorted_conditions() == ["Celiac", "GERD", "ibs"]

    def test_immutable(self) -> None:
        """Should be frozen."""
        profile = HealthProfile()
        with pytest.raises((AttributeError, ValueError)):
            profile.conditions = frozenset({"IBS"})  # noqa: SLF001


class TestHealthProfileResolver:
    """Test resolver input handling."""

    def test_comma_separated_string(self) -> None:
        """Should split comma-separated values."""
        profile = HealthProfileResolver().resolve("IBS, GERD", "Low FODMAP")
        assert profile.conditions == frozenset({"IBS", "GERD"})
        assert profile.dietary_restrictions == frozenset({"Low FODMAP"})

    def test_none_inputs(self) -> None:
        """Should resolve None to an empty profile."""
        assert HealthProfileResolver().resolve(None, None).is_empty

    def test_mixed_iterable(self) -> None:
        """Should ignore junk entries."""
        profile = HealthProfileResolver().resolve(["IBS", None, 42], ["Dairy-free", ""])
        assert profile.conditions == frozenset({"IBS"})
        assert profile.dietary_restrictions == frozenset({"Dairy-free"})
