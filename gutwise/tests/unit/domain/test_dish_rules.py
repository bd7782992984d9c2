"""
Unit tests for the dish scoring rule table.
"""

import pytest

from gutwise.domain.dish.rules import (
    BOOST_RULES,
    DEFAULT_RULES,
    RISK_RULES,
    ScoringRule,
    strip_negations,
    when_any,
    when_condition,
    when_restriction,
)
from gutwise.domain.profile.models import HealthProfile


def _rule(key: str) -> ScoringRule:
    return next(rule for rule in DEFAULT_RULES if rule.key == key)


class TestRuleTable:
    """Test the shape of the canonical table."""

    def test_keys_unique(self) -> None:
        """Should not define a keyword group twice."""
        keys = [rule.key for rule in DEFAULT_RULES]
        assert len(keys) == len(set(keys))

    def test_penalties_before_boosts(self) -> None:
        """Should list every penalty before any boost."""
        assert all(rule.delta < 0 for rule in RISK_RULES)
        assert all(rule.delta > 0 for rule in BOOST_RULES)
        assert DEFAULT_RULES == RISK_RULES + BOOST_RULES

    def test_boosts_have_ceilings(self) -> None:
        """Should cap every boost."""
        assert all(rule.ceiling is not None for rule in BOOST_RULES)

    def test_boosts_apply_to_everyone(self) -> None:
        """Should not gate boosts on the profile."""
        profile = HealthProfile(conditions={"GERD"})
        assert all(rule.applies_to(profile) for rule in BOOST_RULES)


class TestMatching:
    """Test keyword matching."""

    def test_matches_whole_words_and_plurals(self) -> None:
        """Should match plurals but not words merely containing a keyword."""
        rule = _rule("high_fodmap")
        assert rule.matches("crispy onions")
        assert rule.matches("three bean chili")
        assert not rule.matches("sweet bunion")

    def test_fried_matches_hyphenated(self) -> None:
        """Should match deep-fried and pan-fried."""
        assert _rule("fried").matches("deep-fried calamari")
        assert _rule("fried").matches("pan-fried dumplings")

    @pytest.mark.parametrize(
        ("key", "text"),
        [
            ("dairy", "roasted butternut squash soup"),
            ("alcohol", "grilled rump steak"),
            ("high_fodmap", "applewood smoked salmon"),
            ("high_fodmap", "honeydew melon"),
            ("reflux", "limestone-baked flatbread"),
        ],
    )
    def test_keyword_prefix_does_not_match(self, key: str, text: str) -> None:
        """Should not fire on a longer word that starts with a keyword."""
        assert not _rule(key).matches(text)

    @pytest.mark.parametrize(
        ("key", "text"),
        [
            ("gluten", "breaded cutlet"),
            ("gluten", "battered cod"),
            ("gluten", "rice noodles"),
            ("dairy", "cheesy garlic bread"),
            ("dairy", "buttered toast"),
            ("rich_sauce", "mashed potatoes with gravies"),
            ("reflux", "fresh tomatoes"),
            ("whole_grains", "oatmeal with berries"),
        ],
    )
    def test_listed_inflections_match(self, key: str, text: str) -> None:
        """Should match inflected forms listed in the table."""
        assert _rule(key).matches(text)

    def test_exemption_masks_qualified_word(self) -> None:
        """Should blank the exempt phrase and the word it qualifies."""
        rule = _rule("gluten")
        assert not rule.matches(rule.mask_exemptions("gluten-free pasta"))
        assert rule.matches(rule.mask_exemptions("fresh pasta"))

    def test_exemption_is_scoped_to_next_word(self) -> None:
        """Should keep other gluten items in the same text."""
        rule = _rule("gluten")
        masked = rule.mask_exemptions("gluten-free bun, side of spaghetti")

        assert "bun" not in masked
        assert rule.matches(masked)

    def test_rule_without_exemptions_keeps_text(self) -> None:
        assert _rule("fried").mask_exemptions("gluten-free fries") == "gluten-free fries"


class TestConditionality:
    """Test profile predicates."""

    def test_dairy_needs_lactose_or_dairy_free(self) -> None:
        """Should apply dairy only to sensitive profiles."""
        rule = _rule("dairy")
        assert not rule.applies_to(HealthProfile())
        assert rule.applies_to(HealthProfile(conditions={"Lactose Intolerance"}))
        assert rule.applies_to(HealthProfile(dietary_restrictions={"Dairy-free"}))

    def test_gluten_needs_restriction_or_celiac(self) -> None:
        """Should apply gluten to gluten-free diets and celiac disease."""
        rule = _rule("gluten")
        assert not rule.applies_to(HealthProfile())
        assert rule.applies_to(HealthProfile(dietary_restrictions={"Gluten-free"}))
        assert rule.applies_to(HealthProfile(conditions={"Celiac Disease"}))

    def test_fodmap_needs_low_fodmap(self) -> None:
        """Should apply FODMAP only under a low FODMAP diet."""
        rule = _rule("high_fodmap")
        assert not rule.applies_to(HealthProfile(conditions={"IBS"}))
        assert rule.applies_to(HealthProfile(dietary_restrictions={"Low FODMAP"}))

    def test_when_any(self) -> None:
        """Should hold if any predicate holds."""
        predicate = when_any(when_condition("gerd"), when_restriction("vegan"))
        assert predicate(HealthProfile(dietary_restrictions={"Vegan"}))
        assert not predicate(HealthProfile(conditions={"IBS"}))


class TestStripNegations:
    """Test negated phrase removal."""

    @pytest.mark.parametrize(
        ("text", "absent"),
        [
            ("chicken tikka (no onions)", "onion"),
            ("dairy-free pesto", "dairy"),
            ("salad without cheese", "cheese"),
            ("sugar free lemonade", "sugar"),
        ],
    )
    def test_removes_negated_ingredient(self, text: str, absent: str) -> None:
        """Should drop the negated ingredient."""
        assert absent not in strip_negations(text)

    def test_keeps_other_words(self) -> None:
        """Should leave the rest of the text."""
        assert "chicken" in strip_negations("chicken tikka (no onions)")
