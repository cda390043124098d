"""Nutrition estimation and scoring for recipes and meals."""

import math
import re
from collections.abc import Iterable, Mapping

from whattoeat.domain.nutrition import (
    FoodNutrition,
    IngredientEntry,
    IntakeAnalysis,
    NutrientStatus,
    NutritionScore,
)
from whattoeat.services.rounding import round_half_up, round_tenth

DEFAULT_AMOUNT_GRAMS = 100.0

# Per 100 g.
NUTRITION_TABLE: dict[str, FoodNutrition] = {
    "西红柿": FoodNutrition(calories=18, protein=0.9, fat=0.2, carbs=3.5, fiber=1.2),
    "苹果": FoodNutrition(calories=52, protein=0.3, fat=0.2, carbs=13.8, fiber=2.4),
    "鸡蛋": FoodNutrition(calories=155, protein=13, fat=11, carbs=1.1, fiber=0),
    "土豆": FoodNutrition(calories=77, protein=2, fat=0.1, carbs=17, fiber=2.2),
    "胡萝卜": FoodNutrition(calories=41, protein=0.9, fat=0.2, carbs=9.6, fiber=2.8),
    "米饭": FoodNutrition(calories=130, protein=2.6, fat=0.3, carbs=28, fiber=0.3),
    "面条": FoodNutrition(calories=138, protein=4.2, fat=0.7, carbs=28, fiber=1.2),
    "鸡肉": FoodNutrition(calories=165, protein=31, fat=3.6, carbs=0, fiber=0),
    "猪肉": FoodNutrition(calories=242, protein=27, fat=14, carbs=0, fiber=0),
    "牛肉": FoodNutrition(calories=250, protein=26, fat=15, carbs=0, fiber=0),
    "鱼": FoodNutrition(calories=206, protein=22, fat=12, carbs=0, fiber=0),
    "豆腐": FoodNutrition(calories=81, protein=8.1, fat=3.7, carbs=4.2, fiber=0.4),
    "青菜": FoodNutrition(calories=15, protein=1.5, fat=0.2, carbs=2.4, fiber=1.1),
}

DEFAULT_PROFILE = FoodNutrition(calories=50, protein=2, fat=1, carbs=10, fiber=1)

DAILY_TARGETS: dict[str, float] = {
    "calories": 2000,
    "protein": 60,
    "fat": 65,
    "carbs": 300,
}

# Ideal share of macro grams, in percent.
_IDEAL_RATIOS = {"protein": 17.5, "fat": 25.0, "carbs": 57.5}

QUANTITY_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)\s*(?:kg|千克|毫升|ml|g|克|个|根|片|块|条|只|斤|两)"
)

_LOW_INTAKE = 0.8
_HIGH_INTAKE = 1.2


def estimate_nutrition(
    name: str, amount_grams: float = DEFAULT_AMOUNT_GRAMS
) -> FoodNutrition:
    """Look up a food and scale it to the given amount.

    Unknown foods use a generic vegetable-like profile. Calories are rounded
    to an integer, the other fields to one decimal place.
    """
    if not _is_positive(amount_grams):
        amount_grams = DEFAULT_AMOUNT_GRAMS
    base = NUTRITION_TABLE.get(name.strip() if isinstance(name, str) else "")
    if base is None:
        base = DEFAULT_PROFILE
    ratio = amount_grams / 100
    return FoodNutrition(
        calories=round_half_up(base.calories * ratio),
        protein=round_tenth(base.protein * ratio),
        fat=round_tenth(base.fat * ratio),
        carbs=round_tenth(base.carbs * ratio),
        fiber=round_tenth(base.fiber * ratio),
    )


def extract_quantity(text: str) -> float | None:
    """Return the first embedded number+unit quantity, if any."""
    match = QUANTITY_PATTERN.search(text)
    if not match:
        return None
    amount = float(match.group(1))
    return amount if amount > 0 else None


def strip_quantity(text: str) -> str:
    """Remove every number+unit token from an ingredient line."""
    return QUANTITY_PATTERN.sub("", text).strip()


def aggregate_nutrition(ingredients: Iterable[object] | None) -> FoodNutrition:
    """Sum estimated nutrition over a recipe's ingredient list."""
    if not isinstance(ingredients, list | tuple):
        return FoodNutrition.zero()

    total = FoodNutrition.zero()
    for raw in ingredients:
        entry = IngredientEntry.parse(raw)
        if entry is None:
            continue
        amount = extract_quantity(entry.name) or entry.amount or DEFAULT_AMOUNT_GRAMS
        total = total.plus(estimate_nutrition(strip_quantity(entry.name), amount))

    return FoodNutrition(
        calories=round_half_up(total.calories),
        protein=round_tenth(total.protein),
        fat=round_tenth(total.fat),
        carbs=round_tenth(total.carbs),
        fiber=round_tenth(total.fiber),
    )


def calorie_fit_score(actual: float, target: float) -> float:
    """Score closeness to a target as a symmetric percentage difference."""
    if not _is_positive(target):
        return 0.0
    return max(0.0, 100 - abs(actual - target) / target * 100)


def nutrition_balance_score(
    nutrition: FoodNutrition, targets: Mapping[str, float] | None = None
) -> NutritionScore:
    """Score a nutrition profile against daily targets and macro balance."""
    resolved = _resolve_targets(targets)

    calories_score = calorie_fit_score(nutrition.calories, resolved["calories"])
    protein_score = min(100.0, nutrition.protein / resolved["protein"] * 100)
    fat_score = calorie_fit_score(nutrition.fat, resolved["fat"])
    carbs_score = calorie_fit_score(nutrition.carbs, resolved["carbs"])

    total_macro = nutrition.protein + nutrition.fat + nutrition.carbs
    ratios = {
        "protein": nutrition.protein / total_macro * 100 if total_macro > 0 else 0.0,
        "fat": nutrition.fat / total_macro * 100 if total_macro > 0 else 0.0,
        "carbs": nutrition.carbs / total_macro * 100 if total_macro > 0 else 0.0,
    }
    ratio_score = (
        (100 - abs(ratios["protein"] - _IDEAL_RATIOS["protein"]) * 2) * 0.3
        + (100 - abs(ratios["fat"] - _IDEAL_RATIOS["fat"]) * 2) * 0.3
        + (100 - abs(ratios["carbs"] - _IDEAL_RATIOS["carbs"]) * 2) * 0.4
    )

    total_score = (
        calories_score * 0.3
        + protein_score * 0.25
        + fat_score * 0.15
        + carbs_score * 0.15
        + ratio_score * 0.15
    )
    return NutritionScore(
        total_score=round_half_up(total_score),
        calories_score=round_half_up(calories_score),
        protein_score=round_half_up(protein_score),
        fat_score=round_half_up(fat_score),
        carbs_score=round_half_up(carbs_score),
        ratio_score=round_half_up(ratio_score),
        ratios={key: round_tenth(value) for key, value in ratios.items()},
    )


def analyze_intake(
    meals: Iterable[Mapping[str, object]] | None,
    targets: Mapping[str, float] | None = None,
) -> IntakeAnalysis:
    """Aggregate logged meals and classify each macro against its target."""
    total = FoodNutrition.zero()
    for meal in meals or []:
        if not isinstance(meal, Mapping):
            continue
        nutrition = meal.get("nutrition")
        if not isinstance(nutrition, Mapping):
            continue
        total = total.plus(
            FoodNutrition(
                calories=_number(nutrition.get("calories")),
                protein=_number(nutrition.get("protein")),
                fat=_number(nutrition.get("fat")),
                carbs=_number(nutrition.get("carbs")),
                fiber=_number(nutrition.get("fiber")),
            )
        )

    resolved = _resolve_targets(targets)
    values = total.as_dict()
    analysis = {
        key: NutrientStatus(
            value=values[key],
            target=resolved[key],
            status=_intake_status(values[key], resolved[key]),
        )
        for key in DAILY_TARGETS
    }
    return IntakeAnalysis(
        total=total,
        score=nutrition_balance_score(total, resolved),
        analysis=analysis,
    )


def _intake_status(value: float, target: float) -> str:
    if value < target * _LOW_INTAKE:
        return "不足"
    if value > target * _HIGH_INTAKE:
        return "过量"
    return "正常"


def _resolve_targets(targets: Mapping[str, float] | None) -> dict[str, float]:
    resolved = dict(DAILY_TARGETS)
    for key, value in (targets or {}).items():
        if key in resolved and _is_positive(value):
            resolved[key] = float(value)
    return resolved


def _is_positive(value: object) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def _number(value: object) -> float:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return float(value) if math.isfinite(value) else 0.0
    return 0.0
