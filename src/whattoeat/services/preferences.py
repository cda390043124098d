"""Dietary preference scoring."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from whattoeat.services.rounding import round_half_up

NEUTRAL_SCORE = 50
MATCHED_POINTS = 100
UNMATCHED_POINTS = 30


@dataclass(frozen=True)
class PreferenceRule:
    """Maps a named preference to a recipe tag and its importance."""

    tag: str
    weight: float


PREFERENCE_RULES: dict[str, PreferenceRule] = {
    "低脂": PreferenceRule(tag="lowFat", weight=1.5),
    "快手": PreferenceRule(tag="quick", weight=1.2),
    "高蛋白": PreferenceRule(tag="highProtein", weight=1.3),
    "素食": PreferenceRule(tag="vegetarian", weight=1.5),
    "无麸质": PreferenceRule(tag="glutenFree", weight=1.2),
    "低糖": PreferenceRule(tag="lowSugar", weight=1.2),
    "高纤维": PreferenceRule(tag="highFiber", weight=1.1),
}


def preference_score(
    user_preferences: Sequence[str] | None,
    recipe_tags: Mapping[str, object] | None,
) -> int:
    """Weighted agreement between a user's preferences and a recipe's tags.

    Unknown preference names are ignored. Without preferences, tags, or any
    recognised preference the score is neutral (50).
    """
    if not isinstance(user_preferences, list | tuple) or not user_preferences:
        return NEUTRAL_SCORE
    if not isinstance(recipe_tags, Mapping) or not recipe_tags:
        return NEUTRAL_SCORE

    total_score = 0.0
    total_weight = 0.0
    for preference in user_preferences:
        rule = PREFERENCE_RULES.get(preference) if isinstance(preference, str) else None
        if rule is None:
            continue
        matched = recipe_tags.get(rule.tag) is True
        points = MATCHED_POINTS if matched else UNMATCHED_POINTS
        total_score += points * rule.weight
        total_weight += rule.weight

    if total_weight == 0:
        return NEUTRAL_SCORE
    return round_half_up(total_score / total_weight)
