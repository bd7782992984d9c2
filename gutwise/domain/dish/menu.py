"""
Menu-level summary of dish assessments.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from gutwise.domain.dish.models import (
    DishSafetyAssessment,
    MenuSummary,
    RiskBucket,
    bucket_for_score,
)
from gutwise.domain.profile.models import HealthProfile

MAX_HIGHLIGHTED = 3

_OVERALL_TEMPLATES = {
    RiskBucket.SAFE: (
        "This menu has generally good options for digestive health. "
        "Focus on the items with higher safety scores."
    ),
    RiskBucket.CAUTION: (
        "This menu has mixed options. Choose carefully and pay attention to "
        "preparation methods and ingredients that may trigger symptoms."
    ),
    RiskBucket.AVOID: (
        "This menu may be challenging for sensitive digestion. Consider "
        "modifications or stick to the safest options available."
    ),
}


def summarize_menu(
    assessments: Sequence[DishSafetyAssessment],
    profile: HealthProfile,
) -> MenuSummary:
    """
    Build the menu digest for a batch of assessments.

    The overall advice is keyed by the bucket of the average score, so
    the menu and its dishes use the same thresholds.

    Args:
        assessments: Per-dish assessments (any order)
        profile: Profile used for scoring (names conditions in the advice)

    Returns:
        MenuSummary (zeroed when there are no assessments)
    """
    if not assessments:
        return MenuSummary(overall_recommendation="No dishes to analyze.")

    total = sum(a.score for a in assessments)
    average = int(
        (Decimal(total) / Decimal(len(assessments))).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
    )

    safest = sorted(
        (a for a in assessments if a.risk_bucket == RiskBucket.SAFE),
        key=lambda a: (-a.score, a.dish_name),
    )
    riskiest = sorted(
        (a for a in assessments if a.risk_bucket == RiskBucket.AVOID),
        key=lambda a: (a.score, a.dish_name),
    )

    advice = _OVERALL_TEMPLATES[bucket_for_score(average)]
    if profile.conditions:
        conditions = ", ".join(c.lower() for c in profile.sorted_conditions())
        advice = f"{advice} These recommendations are tailored for {conditions}."

    return MenuSummary(
        total_dishes=len(assessments),
        average_score=average,
        safest_options=tuple(a.dish_name for a in safest[:MAX_HIGHLIGHTED]),
        riskiest_options=tuple(a.dish_name for a in riskiest[:MAX_HIGHLIGHTED]),
        overall_recommendation=advice,
    )
