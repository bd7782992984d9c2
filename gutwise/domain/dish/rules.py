"""
Canonical dish scoring rule table.

Every keyword group the scorer knows lives here as data: what it matches,
how much it moves the score, the reason shown to the user, and the
profile condition under which it applies. The scorer iterates this list
once; adding a rule never requires touching scoring logic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Pattern, Tuple

from gutwise.domain.profile.models import HealthProfile

ProfilePredicate = Callable[[HealthProfile], bool]

BASE_SCORE = 75


def always(profile: HealthProfile) -> bool:
    """Rule applies to every profile."""
    return True


def when_condition(*needles: str) -> ProfilePredicate:
    """Rule applies when a health condition mentions any needle."""

    def predicate(profile: HealthProfile) -> bool:
        return profile.has_condition(*needles)

    return predicate


def when_restriction(*needles: str) -> ProfilePredicate:
    """Rule applies when a dietary restriction mentions any needle."""

    def predicate(profile: HealthProfile) -> bool:
        return profile.has_restriction(*needles)

    return predicate


def when_any(*predicates: ProfilePredicate) -> ProfilePredicate:
    """Rule applies when any predicate holds."""

    def predicate(profile: HealthProfile) -> bool:
        return any(p(profile) for p in predicates)

    return predicate


@dataclass(frozen=True)
class ScoringRule:
    """
    One keyword group with its score effect.

    Attributes:
        key: Stable rule identifier
        keywords: Lower-case keywords, matched as whole words (plural -s/-es allowed)
        delta: Score change (negative = risk, positive = safety)
        reason: Text added to triggers or safe aspects
        applies_when: Profile predicate gating the rule
        ceiling: For boosts, the running score the boost may not exceed
        modification: Optional ordering suggestion for risk rules
        exempt_phrases: Qualifiers that exempt the word right after them
    """

    key: str
    keywords: Tuple[str, ...]
    delta: int
    reason: str
    applies_when: ProfilePredicate = always
    ceiling: Optional[int] = None
    modification: Optional[str] = None
    exempt_phrases: Tuple[str, ...] = ()
    pattern: Pattern[str] = field(init=False, repr=False, compare=False)
    exempt_pattern: Optional[Pattern[str]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        alternatives = "|".join(
            re.escape(k) for k in sorted(self.keywords, key=len, reverse=True)
        )
        object.__setattr__(self, "pattern", re.compile(rf"\b(?:{alternatives})(?:e?s)?\b"))
        exempt_pattern = None
        if self.exempt_phrases:
            phrases = "|".join(
                re.escape(p) for p in sorted(self.exempt_phrases, key=len, reverse=True)
            )
            exempt_pattern = re.compile(rf"\b(?:{phrases})\b(?:\s+[\w-]+)?")
        object.__setattr__(self, "exempt_pattern", exempt_pattern)

    @property
    def is_boost(self) -> bool:
        return self.delta > 0

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None

    def mask_exemptions(self, raw_text: str) -> str:
        """
        Blank out exempt qualifiers together with the word they qualify.

        Example:
            >>> rule = ScoringRule("gluten", ("pasta",), -25, "Contains gluten",
            ...                    exempt_phrases=("gluten-free",))
            >>> rule.mask_exemptions("gluten-free bun, pasta")
            ' , pasta'
        """
        if self.exempt_pattern is None:
            return raw_text
        return self.exempt_pattern.sub(" ", raw_text)

    def applies_to(self, profile: HealthProfile) -> bool:
        return self.applies_when(profile)


# ═══════════════════════════════════════════════════════════
# RISK RULES
# ═══════════════════════════════════════════════════════════

RISK_RULES: Tuple[ScoringRule, ...] = (
    ScoringRule(
        key="fried",
        keywords=("deep-fried", "deep fried", "fried", "battered", "tempura"),
        delta=-20,
        reason="High fat content from frying",
        modification="Ask for grilled or baked instead",
    ),
    ScoringRule(
        key="spicy",
        keywords=(
            "spicy",
            "chili",
            "chilli",
            "jalapeño",
            "jalapeno",
            "hot sauce",
            "sriracha",
            "vindaloo",
            "cayenne",
            "habanero",
        ),
        delta=-10,
        reason="Spicy ingredients may irritate the digestive system",
        modification="Request mild seasoning or spice on the side",
    ),
    ScoringRule(
        key="rich_sauce",
        keywords=(
            "creamy",
            "cream sauce",
            "alfredo",
            "carbonara",
            "gravy",
            "gravies",
            "greasy",
            "heavy sauce",
        ),
        delta=-10,
        reason="Rich, heavy sauce",
        modification="Ask for the sauce on the side",
    ),
    ScoringRule(
        key="alcohol",
        keywords=("wine", "beer", "sake", "vodka", "rum", "bourbon", "liqueur", "brandy"),
        delta=-5,
        reason="Contains alcohol",
    ),
    ScoringRule(
        key="high_sugar",
        keywords=(
            "syrup",
            "syrupy",
            "sugar",
            "sugary",
            "candied",
            "frosting",
            "caramel",
            "tres leches",
        ),
        delta=-5,
        reason="High sugar content",
    ),
    ScoringRule(
        key="dairy",
        keywords=(
            "cheese",
            "cheesy",
            "cheeseburger",
            "milk",
            "milky",
            "milkshake",
            "cream",
            "creamy",
            "creamed",
            "butter",
            "buttery",
            "buttered",
            "buttermilk",
            "yogurt",
            "yoghurt",
            "mozzarella",
            "parmesan",
            "feta",
            "ricotta",
            "dairy",
            "queso",
        ),
        delta=-25,
        reason="Contains dairy",
        applies_when=when_any(when_condition("lactose"), when_restriction("dairy free")),
        modification="Ask for a dairy-free alternative",
        exempt_phrases=("dairy-free", "dairy free", "lactose-free", "lactose free", "vegan"),
    ),
    ScoringRule(
        key="gluten",
        keywords=(
            "wheat",
            "flour",
            "bread",
            "breaded",
            "pasta",
            "spaghetti",
            "noodle",
            "barley",
            "rye",
            "crouton",
            "breadcrumb",
            "batter",
            "battered",
            "floured",
            "tortilla",
            "pizza",
            "couscous",
            "seitan",
            "phyllo",
            "gnocchi",
        ),
        delta=-25,
        reason="Contains gluten",
        applies_when=when_any(
            when_restriction("gluten free"),
            when_condition("celiac", "coeliac", "gluten"),
        ),
        modification="Ask for a gluten-free option",
        exempt_phrases=("gluten-free", "gluten free"),
    ),
    ScoringRule(
        key="high_fodmap",
        keywords=(
            "onion",
            "garlic",
            "garlicky",
            "shallot",
            "leek",
            "bean",
            "lentil",
            "chickpea",
            "honey",
            "apple",
            "cauliflower",
            "mushroom",
        ),
        delta=-15,
        reason="High FODMAP ingredients (onion, garlic, legumes)",
        applies_when=when_restriction("fodmap"),
        modification="Request minimal garlic and onion",
        exempt_phrases=("low fodmap", "low-fodmap"),
    ),
    ScoringRule(
        key="ibs",
        keywords=(
            "spicy",
            "chili",
            "bean",
            "cabbage",
            "onion",
            "garlic",
            "broccoli",
            "coffee",
            "caffeine",
        ),
        delta=-10,
        reason="May trigger IBS symptoms",
        applies_when=when_condition("ibs", "irritable bowel"),
    ),
    ScoringRule(
        key="reflux",
        keywords=(
            "tomato",
            "marinara",
            "citrus",
            "lemon",
            "lemonade",
            "lime",
            "orange",
            "vinegar",
            "wine",
            "spicy",
            "chocolate",
            "coffee",
            "mint",
            "minty",
        ),
        delta=-15,
        reason="Acidic ingredients may trigger reflux",
        applies_when=when_condition("gerd", "reflux", "acid"),
        modification="Ask for acidic ingredients to be left out",
    ),
)


# ═══════════════════════════════════════════════════════════
# SAFETY BOOSTS
# ═══════════════════════════════════════════════════════════

BOOST_RULES: Tuple[ScoringRule, ...] = (
    ScoringRule(
        key="gentle_cooking",
        keywords=("grilled", "steamed", "baked", "roasted", "poached"),
        delta=10,
        reason="Gentle cooking method",
        ceiling=90,
    ),
    ScoringRule(
        key="fresh_vegetables",
        keywords=(
            "salad",
            "greens",
            "lettuce",
            "spinach",
            "kale",
            "vegetable",
            "veggie",
            "cucumber",
            "zucchini",
        ),
        delta=5,
        reason="Fresh vegetables",
        ceiling=90,
    ),
    ScoringRule(
        key="lean_protein",
        keywords=("chicken", "turkey", "fish", "salmon", "cod", "tuna", "shrimp", "tofu", "egg white"),
        delta=5,
        reason="Lean protein",
        ceiling=90,
    ),
    ScoringRule(
        key="whole_grains",
        keywords=(
            "quinoa",
            "brown rice",
            "oat",
            "oatmeal",
            "whole grain",
            "whole-grain",
            "millet",
            "buckwheat",
        ),
        delta=5,
        reason="Whole grains",
        ceiling=90,
    ),
    ScoringRule(
        key="light_broth",
        keywords=("broth", "clear soup", "consommé", "consomme"),
        delta=5,
        reason="Light, broth-based dish",
        ceiling=85,
    ),
)

# Penalties first, then boosts: boost ceilings are checked against the
# score after all risks are counted.
DEFAULT_RULES: Tuple[ScoringRule, ...] = RISK_RULES + BOOST_RULES


_NEGATIONS = (
    re.compile(r"\b[\w]+(?:-|\s)free\b"),
    re.compile(r"\b(?:no|without)\s+[\w-]+"),
)


def strip_negations(text: str) -> str:
    """
    Remove negated ingredient phrases before keyword scanning.

    Example:
        >>> text = strip_negations("chicken tikka (no onions), dairy-free")
        >>> assert "onion" not in text and "dairy" not in text
    """
    for pattern in _NEGATIONS:
        text = pattern.sub(" ", text)
    return text
