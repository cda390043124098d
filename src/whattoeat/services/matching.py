"""Ingredient matching between a user's foods and a recipe."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from whattoeat.domain.recipes import MatchResult
from whattoeat.services.nutrition import strip_quantity
from whattoeat.services.rounding import round_half_up

KEY_INGREDIENTS = ("肉", "鱼", "鸡", "蛋", "豆腐", "米饭", "面")
MISSING_KEY_PENALTY = 0.7

_PUNCTUATION = re.compile(r"[，,。、]")


class IngredientMatcher(Protocol):
    """Decides whether a user's food satisfies a recipe ingredient."""

    def matches(self, user_food: str, ingredient: str) -> bool:
        """Return True when both normalized names refer to the same food."""


@dataclass(frozen=True)
class SubstringMatcher(IngredientMatcher):
    """Lenient matcher: either name contains the other.

    Tolerates quantity suffixes and compound names ("鸡蛋" vs "土鸡蛋") but
    also accepts short substrings such as "豆" inside "豆腐".
    """

    def matches(self, user_food: str, ingredient: str) -> bool:
        return user_food in ingredient or ingredient in user_food


@dataclass(frozen=True)
class ExactMatcher(IngredientMatcher):
    """Strict matcher: normalized names must be identical."""

    def matches(self, user_food: str, ingredient: str) -> bool:
        return user_food == ingredient


def normalize_food(name: str) -> str:
    """Strip quantity tokens and punctuation from a food name."""
    return _PUNCTUATION.sub("", strip_quantity(name)).strip()


def match_score(
    user_foods: Sequence[str] | None,
    recipe_ingredients: Sequence[str] | None,
    matcher: IngredientMatcher | None = None,
) -> MatchResult:
    """Compute how much of a recipe the user's foods cover."""
    foods = _strings(user_foods)
    ingredients = _strings(recipe_ingredients)
    if not foods:
        return MatchResult(score=0, matched=[], missing=ingredients, match_ratio=0)
    if not ingredients:
        return MatchResult(score=100, matched=[], missing=[], match_ratio=1)

    resolved_matcher = matcher or SubstringMatcher()
    normalized_foods = [food for food in map(normalize_food, foods) if food]

    matched: list[str] = []
    missing: list[str] = []
    for ingredient in map(normalize_food, ingredients):
        if any(resolved_matcher.matches(food, ingredient) for food in normalized_foods):
            matched.append(ingredient)
        else:
            missing.append(ingredient)

    match_ratio = len(matched) / len(ingredients)
    score = match_ratio * 100
    if any(key in ingredient for ingredient in missing for key in KEY_INGREDIENTS):
        score *= MISSING_KEY_PENALTY

    return MatchResult(
        score=round_half_up(score),
        matched=matched,
        missing=missing,
        match_ratio=match_ratio,
    )


def _strings(values: Sequence[str] | None) -> list[str]:
    if not isinstance(values, list | tuple):
        return []
    return [value for value in values if isinstance(value, str)]
