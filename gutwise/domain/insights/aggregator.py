"""
Insight aggregator.

Turns correlated meals and check-ins into food associations, symptom
statistics, ratios and the week-over-week trend.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import structlog

from gutwise.domain.insights.models import (
    FoodSymptomAssociation,
    InsightCard,
    InsightKind,
    InsightsSummary,
    SymptomStatistic,
    Trend,
    empty_feeling_distribution,
)
from gutwise.domain.tracking.models import (
    MealRecord,
    Polarity,
    SymptomRecord,
)

logger = structlog.get_logger(__name__)

TOP_SAFE_FOODS = 5
TOP_RISKY_FOODS = 3
TOP_SYMPTOMS = 3
TOP_FOODS_PER_SYMPTOM = 3
ASSOCIATED_SYMPTOM_SAMPLE = 3
MAX_INSIGHTS = 3

TREND_HALF = 7
SAFE_RATIO_GOOD = 80
SAFE_RATIO_POOR = 60


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round with ties away from zero.

    Example:
        >>> round_half_up(62.5)
        63.0
        >>> round_half_up(2.25, 1)
        2.3
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _name_key(name: str) -> str:
    return name.strip().casefold()


class _AssociationBuilder:
    def __init__(self, dish_name: str):
        self.dish_name = dish_name
        self.positive = 0
        self.negative = 0
        self.neutral = 0
        self.symptoms: List[str] = []
        self.restaurant: Optional[str] = None

    def add(self, meal: MealRecord, outcome: SymptomRecord) -> None:
        if self.restaurant is None and meal.restaurant_name:
            self.restaurant = meal.restaurant_name
        polarity = outcome.polarity
        if polarity == Polarity.POSITIVE:
            self.positive += 1
        elif polarity == Polarity.NEGATIVE:
            self.negative += 1
            for name in outcome.specific_symptoms:
                if len(self.symptoms) >= ASSOCIATED_SYMPTOM_SAMPLE:
                    break
                if name not in self.symptoms:
                    self.symptoms.append(name)
        else:
            self.neutral += 1

    def build(self) -> FoodSymptomAssociation:
        return FoodSymptomAssociation(
            dish_name=self.dish_name,
            positive_count=self.positive,
            negative_count=self.negative,
            neutral_count=self.neutral,
            associated_symptoms=tuple(self.symptoms),
            sample_restaurant=self.restaurant,
        )


class InsightAggregator:
    """
    Aggregates correlated meal outcomes into an InsightsSummary.

    Pure and synchronous: it never raises on empty or malformed input.
    Items it cannot interpret are skipped.

    Example:
        >>> aggregator = InsightAggregator()
        >>> pairs = MealSymptomCorrelator().correlate(meals, symptoms)
        >>> summary = aggregator.summarize(pairs, symptoms)
        >>> print(summary.safe_ratio_percent, summary.trend)
    """

    def summarize(
        self,
        correlated: Optional[Iterable[Any]],
        all_symptoms: Optional[Iterable[Any]],
    ) -> InsightsSummary:
        """
        Build the summary.

        Args:
            correlated: (meal, outcome) pairs from the correlator
            all_symptoms: Every check-in in the period

        Returns:
            InsightsSummary (the empty summary for empty input)
        """
        pairs = _valid_pairs(correlated)
        symptoms = [s for s in (all_symptoms or ()) if isinstance(s, SymptomRecord)]

        associations = self._associations(pairs)
        safe_foods = sorted(
            (a for a in associations if a.positive_count > 0 and a.negative_count == 0),
            key=lambda a: (-a.positive_count, a.dish_name),
        )[:TOP_SAFE_FOODS]
        risky_foods = sorted(
            (a for a in associations if a.negative_count > 0),
            key=lambda a: (-a.negative_count, a.dish_name),
        )[:TOP_RISKY_FOODS]

        top_symptoms = self._top_symptoms(pairs, symptoms)
        total = len(symptoms)
        positive = sum(1 for s in symptoms if s.polarity == Polarity.POSITIVE)
        safe_ratio = int(round_half_up(100 * positive / total)) if total else 0

        severities = [v for s in symptoms for v in s.valid_severities().values()]
        average_severity = (
            round_half_up(sum(severities) / len(severities), 1) if severities else 0.0
        )

        distribution = empty_feeling_distribution()
        for symptom in symptoms:
            distribution[symptom.overall_feeling.value] += 1

        trend, trend_detail = classify_trend(symptoms)

        summary = InsightsSummary(
            total_entries=total,
            total_meals=len(pairs),
            safe_ratio_percent=safe_ratio,
            average_severity=average_severity,
            top_safe_foods=tuple(safe_foods),
            top_risky_foods=tuple(risky_foods),
            top_symptoms=tuple(top_symptoms),
            trend=trend,
            trend_detail=trend_detail,
            feeling_distribution=distribution,
            insights=tuple(build_insight_cards(trend, total, safe_ratio, top_symptoms)),
        )
        logger.debug(
            "Insights summarized",
            entries=total,
            meals=len(pairs),
            associations=len(associations),
            trend=trend.value,
        )
        return summary

    @staticmethod
    def _associations(
        pairs: Sequence[Tuple[MealRecord, Optional[SymptomRecord]]],
    ) -> List[FoodSymptomAssociation]:
        builders: Dict[str, _AssociationBuilder] = {}
        for meal, outcome in pairs:
            key = _name_key(meal.dish_name)
            if outcome is None or not key:
                continue
            if key not in builders:
                builders[key] = _AssociationBuilder(meal.dish_name.strip())
            builders[key].add(meal, outcome)
        return [builder.build() for builder in builders.values()]

    @staticmethod
    def _top_symptoms(
        pairs: Sequence[Tuple[MealRecord, Optional[SymptomRecord]]],
        symptoms: Sequence[SymptomRecord],
    ) -> List[SymptomStatistic]:
        names: Dict[str, str] = {}
        counts: Dict[str, int] = {}
        severities: Dict[str, List[int]] = {}

        for symptom in symptoms:
            valid = symptom.valid_severities()
            for name in symptom.specific_symptoms:
                key = _name_key(name)
                names.setdefault(key, name)
                counts[key] = counts.get(key, 0) + 1
                if name in valid:
                    severities.setdefault(key, []).append(valid[name])

        food_names: Dict[str, str] = {}
        foods: Dict[str, Dict[str, int]] = {}
        for meal, outcome in pairs:
            dish_key = _name_key(meal.dish_name)
            if outcome is None or not dish_key:
                continue
            food_names.setdefault(dish_key, meal.dish_name.strip())
            for name in {_name_key(n) for n in outcome.specific_symptoms}:
                per_symptom = foods.setdefault(name, {})
                per_symptom[dish_key] = per_symptom.get(dish_key, 0) + 1

        ranked = sorted(counts, key=lambda k: (-counts[k], names[k]))[:TOP_SYMPTOMS]
        statistics = []
        for key in ranked:
            values = severities.get(key, [])
            co_occurring = foods.get(key, {})
            top_foods = sorted(
                co_occurring, key=lambda d: (-co_occurring[d], food_names[d])
            )[:TOP_FOODS_PER_SYMPTOM]
            statistics.append(
                SymptomStatistic(
                    name=names[key],
                    count=counts[key],
                    avg_severity=(
                        round_half_up(sum(values) / len(values), 1) if values else 0.0
                    ),
                    top_foods=tuple(food_names[d] for d in top_foods),
                )
            )
        return statistics


def _valid_pairs(
    correlated: Optional[Iterable[Any]],
) -> List[Tuple[MealRecord, Optional[SymptomRecord]]]:
    pairs: List[Tuple[MealRecord, Optional[SymptomRecord]]] = []
    for item in correlated or ():
        try:
            meal, outcome = item
        except (TypeError, ValueError):
            continue
        if not isinstance(meal, MealRecord):
            continue
        if not isinstance(outcome, SymptomRecord):
            outcome = None
        pairs.append((meal, outcome))
    return pairs


def _good_bad(symptoms: Sequence[SymptomRecord]) -> Tuple[int, int]:
    good = sum(1 for s in symptoms if s.polarity == Polarity.POSITIVE)
    bad = sum(1 for s in symptoms if s.polarity == Polarity.NEGATIVE)
    return good, bad


def classify_trend(symptoms: Sequence[SymptomRecord]) -> Tuple[Trend, str]:
    """
    Classify the week-over-week trend of check-ins.

    With 14+ check-ins the latest 7 are compared to the 7 before them.
    With 7-13 only the latest 7 are inspected. Below 7 the trend is
    stable for lack of data.

    Returns:
        (trend, human-readable detail)
    """
    total = len(symptoms)
    if total < TREND_HALF:
        return Trend.STABLE, (
            f"Not enough check-ins to detect a trend "
            f"({total} of {TREND_HALF} needed)."
        )

    latest = sorted(
        symptoms, key=lambda s: (s.recorded_timestamp, s.id), reverse=True
    )
    recent_good, recent_bad = _good_bad(latest[:TREND_HALF])

    if total < 2 * TREND_HALF:
        if recent_bad > recent_good:
            return Trend.CONCERNING, (
                f"{recent_bad} of your last {TREND_HALF} check-ins were negative "
                f"against {recent_good} positive."
            )
        return Trend.STABLE, (
            f"{recent_good} positive and {recent_bad} negative in your last "
            f"{TREND_HALF} check-ins."
        )

    previous_good, previous_bad = _good_bad(latest[TREND_HALF : 2 * TREND_HALF])
    detail = (
        f"Last {TREND_HALF} check-ins: {recent_good} positive, {recent_bad} negative "
        f"(previous {TREND_HALF}: {previous_good} positive, {previous_bad} negative)."
    )
    if recent_good > previous_good and recent_bad <= previous_bad:
        return Trend.IMPROVING, detail
    if recent_bad > previous_bad:
        return Trend.CONCERNING, detail
    return Trend.STABLE, detail


def build_insight_cards(
    trend: Trend,
    total_entries: int,
    safe_ratio: int,
    top_symptoms: Sequence[SymptomStatistic],
) -> List[InsightCard]:
    """Dashboard cards: trend, safe ratio, top symptom (at most 3)."""
    cards: List[InsightCard] = []

    if trend == Trend.IMPROVING:
        cards.append(
            InsightCard(
                kind=InsightKind.POSITIVE,
                title="Great progress this week!",
                description="Your digestive health is trending upward. Keep it up!",
            )
        )
    elif trend == Trend.CONCERNING:
        cards.append(
            InsightCard(
                kind=InsightKind.WARNING,
                title="Watch your recent choices",
                description="More symptoms than usual this week. Consider reviewing your meals.",
            )
        )

    if total_entries:
        if safe_ratio >= SAFE_RATIO_GOOD:
            cards.append(
                InsightCard(
                    kind=InsightKind.POSITIVE,
                    title="Excellent food choices!",
                    description=f"{safe_ratio}% of your check-ins had no major issues",
                )
            )
        elif safe_ratio < SAFE_RATIO_POOR:
            cards.append(
                InsightCard(
                    kind=InsightKind.WARNING,
                    title="Room for improvement",
                    description=f"Only {safe_ratio}% positive check-ins. Let's identify your triggers.",
                )
            )

    if top_symptoms:
        top = top_symptoms[0]
        cards.append(
            InsightCard(
                kind=InsightKind.TIP,
                title=f"Watch out for {top.name.lower()}",
                description=(
                    f"Your most frequent symptom ({top.count} times, "
                    f"avg severity {top.avg_severity})"
                ),
            )
        )

    return cards[:MAX_INSIGHTS]
