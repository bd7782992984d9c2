"""
Dish safety scorer.

Rule-based, deterministic scoring of a dish against a health profile.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence

import structlog

from gutwise.domain.dish.models import (
    DishInput,
    DishSafetyAssessment,
    RiskBucket,
    clamp_score,
)
from gutwise.domain.dish.rules import (
    BASE_SCORE,
    DEFAULT_RULES,
    ScoringRule,
    strip_negations,
)
from gutwise.domain.profile.models import HealthProfile

logger = structlog.get_logger(__name__)

NEUTRAL_RECOMMENDATION = "insufficient information"

_BUCKET_TEMPLATES = {
    RiskBucket.SAFE: "{name} appears to be a good choice for digestive health.",
    RiskBucket.CAUTION: "{name} is moderately safe.",
    RiskBucket.AVOID: "{name} may be challenging for sensitive digestion.",
}

_TRIGGER_ADVICE = {
    RiskBucket.CAUTION: "Consider the suggested modifications.",
    RiskBucket.AVOID: "Exercise caution and consider modifications.",
}


class DishSafetyScorer:
    """
    Scores a dish's digestive safety for a given health profile.

    Starts from a base score of 75 and applies every matching rule of the
    rule table exactly once: penalties first, then boosts (each boost is
    capped at its own ceiling). The result is clamped into [0, 100] and
    bucketed with the canonical thresholds.

    Randomness only exists when an rng is injected, and it only ever
    touches confidence, never the score.

    Example:
        >>> scorer = DishSafetyScorer()
        >>> assessment = scorer.score(
        ...     DishInput(name="Deep-Fried Onion Rings", description="onion, batter, fried"),
        ...     HealthProfile(dietary_restrictions={"Low FODMAP"}),
        ... )
        >>> assert assessment.risk_bucket == RiskBucket.AVOID
    """

    def __init__(
        self,
        rules: Sequence[ScoringRule] = DEFAULT_RULES,
        rng: Optional[random.Random] = None,
        confidence_jitter: int = 0,
    ):
        """
        Initialize scorer.

        Args:
            rules: Rule table to evaluate (penalties are applied before boosts)
            rng: Optional random source for confidence jitter
            confidence_jitter: Max absolute confidence perturbation (needs rng)
        """
        if confidence_jitter < 0:
            raise ValueError("confidence_jitter must not be negative")
        self.rules = tuple(rules)
        self.rng = rng
        self.confidence_jitter = confidence_jitter

    def score(self, dish: DishInput, profile: HealthProfile) -> DishSafetyAssessment:
        """
        Score one dish.

        Args:
            dish: Dish name and description
            profile: User health profile

        Returns:
            DishSafetyAssessment (neutral when no rule matches)
        """
        raw_text = dish.text

        fired = [
            rule
            for rule in self.rules
            if rule.applies_to(profile)
            and rule.matches(strip_negations(rule.mask_exemptions(raw_text)))
        ]

        if not fired:
            return self._neutral(dish)

        running = BASE_SCORE
        triggers: list[str] = []
        safe_aspects: list[str] = []
        modifications: list[str] = []

        for rule in (r for r in fired if not r.is_boost):
            running += rule.delta
            triggers.append(rule.reason)
            if rule.modification:
                modifications.append(rule.modification)

        for rule in (r for r in fired if r.is_boost):
            if rule.ceiling is None:
                running += rule.delta
            else:
                running += min(rule.delta, max(0, rule.ceiling - running))
            safe_aspects.append(rule.reason)

        score = clamp_score(running)
        assessment = DishSafetyAssessment(
            dish_name=dish.name,
            score=score,
            triggers=triggers,
            safe_aspects=safe_aspects,
            modifications=modifications,
            confidence=self._confidence(score),
        )
        recommendation = self._recommendation(
            dish, assessment.risk_bucket, bool(triggers), profile
        )

        logger.debug(
            "Dish scored",
            dish=dish.name,
            score=score,
            rules=[rule.key for rule in fired],
        )
        return assessment.model_copy(update={"recommendation": recommendation})

    def _neutral(self, dish: DishInput) -> DishSafetyAssessment:
        return DishSafetyAssessment(
            dish_name=dish.name,
            score=BASE_SCORE,
            recommendation=NEUTRAL_RECOMMENDATION,
            confidence=self._confidence(BASE_SCORE),
        )

    def _confidence(self, score: int) -> int:
        if self.rng is None or self.confidence_jitter == 0:
            return score
        jitter = self.rng.randint(-self.confidence_jitter, self.confidence_jitter)
        return clamp_score(score + jitter)

    @staticmethod
    def _recommendation(
        dish: DishInput,
        bucket: RiskBucket,
        has_triggers: bool,
        profile: HealthProfile,
    ) -> str:
        name = dish.name.strip() or "This dish"
        parts = [_BUCKET_TEMPLATES[bucket].format(name=name)]
        if has_triggers and bucket in _TRIGGER_ADVICE:
            parts.append(_TRIGGER_ADVICE[bucket])
        if profile.conditions:
            conditions = ", ".join(c.lower() for c in profile.sorted_conditions())
            parts.append(f"This assessment accounts for your {conditions}.")
        return " ".join(parts)


_default_scorer = DishSafetyScorer()


def score_dish(dish: DishInput, profile: HealthProfile) -> DishSafetyAssessment:
    """
    Score a dish with the default rule table and no randomness.

    Example:
        >>> a = score_dish(DishInput(name="Grilled Salmon"), HealthProfile())
        >>> assert a.score == 90
    """
    return _default_scorer.score(dish, profile)
