"""
OpenAI prompts for dish safety analysis.

IMPORTANT: System prompts are cacheable by OpenAI.
Keep static instructions in SYSTEM_PROMPT and dynamic content in user messages.
"""

from typing import Any, Dict, List

from gutwise.domain.dish.models import DishInput
from gutwise.domain.profile.models import HealthProfile


# ═══════════════════════════════════════════════════════════
# SYSTEM PROMPT (Cacheable - static instructions)
# ═══════════════════════════════════════════════════════════

DISH_SYSTEM_PROMPT = """You are a digestive health expert who analyzes restaurant dishes for people with sensitive digestion.

Your task: Rate how safe ONE dish is for the user's digestive health profile.

Consider common triggers:
- High fat and fried preparation
- Spicy ingredients
- Dairy (lactose)
- Gluten
- High FODMAP ingredients (onion, garlic, beans, legumes)
- Acidic ingredients (tomato, citrus, vinegar) for reflux
- Alcohol and high sugar

Output: JSON object with:
- safetyScore: integer 0-100 (higher = safer for digestive health)
- triggers: array of short reasons the dish may cause issues
- safeAspects: array of short reasons the dish is gentle
- modifications: array of realistic ordering changes that reduce risk
- recommendation: one or two sentences of advice

Scoring guidelines:
- 85-100: Safe choice for this profile
- 65-84: Caution, depends on preparation or portion
- 0-64: Likely to cause symptoms, avoid

Always respond with valid JSON only.
"""


# ═══════════════════════════════════════════════════════════
# USER MESSAGE BUILDERS (Dynamic - not cached)
# ═══════════════════════════════════════════════════════════


def build_dish_user_message(dish: DishInput, profile: HealthProfile) -> str:
    """Build user message for one dish.

    Args:
        dish: Dish name and description
        profile: User health profile

    Returns:
        User message text
    """
    conditions = ", ".join(profile.sorted_conditions()) or "general digestive sensitivity"
    restrictions = ", ".join(sorted(profile.dietary_restrictions)) or "none"

    lines = [
        f"Health conditions: {conditions}",
        f"Dietary restrictions: {restrictions}",
        "",
        f"Dish: {dish.name or 'Unnamed dish'}",
    ]
    if dish.description:
        lines.append(f"Description / ingredients: {dish.description}")
    return "\n".join(lines)


def build_dish_messages(dish: DishInput, profile: HealthProfile) -> List[Dict[str, Any]]:
    """Build the chat messages for one dish.

    Example:
        >>> messages = build_dish_messages(
        ...     DishInput(name="Pad Thai", description="rice noodles, peanuts"),
        ...     HealthProfile(conditions={"IBS"}),
        ... )
        >>> assert messages[0]["role"] == "system"
    """
    return [
        {"role": "system", "content": DISH_SYSTEM_PROMPT},
        {"role": "user", "content": build_dish_user_message(dish, profile)},
    ]
