"""
Unit tests for dish domain models.

Testing clamping, bucket derivation and list normalization.
"""

import pytest

from gutwise.domain.dish.models import (
    AssessmentSource,
    DishInput,
    DishSafetyAssessment,
    RiskBucket,
    bucket_for_score,
    clamp_score,
)


class TestClampScore:
    """Test score clamping."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(120, 100), (-5, 0), (71.5, 72), (71.4, 71), ("64", 64), (0, 0), (100, 100)],
    )
    def test_clamps_and_rounds(self, raw: object, expected: int) -> None:
        """Should clamp into [0, 100] and round half up."""
        assert clamp_score(raw) == expected

    def test_rejects_bool(self) -> None:
        """Should not treat booleans as scores."""
        with pytest.raises(ValueError):
            clamp_score(True)

    def test_rejects_nan(self) -> None:
        """Should reject NaN."""
        with pytest.raises(ValueError):
            clamp_score(float("nan"))


class TestBucketForScore:
    """Test canonical thresholds."""

    @pytest.mark.parametrize(
        ("score", "bucket"),
        [
            (100, RiskBucket.SAFE),
            (85, RiskBucket.SAFE),
            (84, RiskBucket.CAUTION),
            (65, RiskBucket.CAUTION),
            (64, RiskBucket.AVOID),
            (0, RiskBucket.AVOID),
        ],
    )
    def test_thresholds(self, score: int, bucket: RiskBucket) -> None:
        """Should map boundaries to the right bucket."""
        assert bucket_for_score(score) == bucket


class TestDishInput:
    """Test DishInput model."""

    def test_none_becomes_empty(self) -> None:
        """Should accept None text."""
        dish = DishInput(name=None, description=None)
        assert dish.name == ""
        assert dish.text == ""

    def test_text_lowercases(self) -> None:
        """Should lower-case name and description."""
        dish = DishInput(name="Pad THAI", description="Rice Noodles")
        assert dish.text == "pad thai rice noodles"


class TestDishSafetyAssessment:
    """Test DishSafetyAssessment validation."""

    def test_bucket_derived_from_score(self) -> None:
        """Should ignore a supplied bucket that disagrees with the score."""
        assessment = DishSafetyAssessment(score=90, risk_bucket=RiskBucket.AVOID)
        assert assessment.risk_bucket == RiskBucket.SAFE

    def test_score_and_confidence_clamped(self) -> None:
        """Should clamp out-of-range values."""
        assessment = DishSafetyAssessment(score=140, confidence=-3)
        assert assessment.score == 100
        assert assessment.confidence == 0
        assert assessment.risk_bucket == RiskBucket.SAFE

    def test_lists_deduplicated_in_order(self) -> None:
        """Should keep first occurrence order."""
        assessment = DishSafetyAssessment(
            score=50,
            triggers=["Contains dairy", "Spicy", "Contains dairy", ""],
            safe_aspects="Lean protein",
        )
        assert assessment.triggers == ("Contains dairy", "Spicy")
        assert assessment.safe_aspects == ("Lean protein",)

    def test_defaults(self) -> None:
        """Should default to local source without fallback."""
        assessment = DishSafetyAssessment(score=75)
        assert assessment.source == AssessmentSource.LOCAL_RULES
        assert assessment.confidence == 0
        assert not assessment.is_fallback

    def test_immutable(self) -> None:
        """Should be frozen."""
        assessment = DishSafetyAssessment(score=75)
        with pytest.raises((AttributeError, ValueError)):
            assessment.score = 10  # noqa: SLF001
