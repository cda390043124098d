"""AI recipe generation with a deterministic fallback."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from whattoeat.domain.generation import GeneratedRecipe
from whattoeat.domain.nutrition import FoodNutrition, NutritionScore
from whattoeat.domain.recipes import MatchResult, UserProfile
from whattoeat.services.matching import match_score
from whattoeat.services.nutrition import aggregate_nutrition, nutrition_balance_score
from whattoeat.services.preferences import preference_score

NO_PREFERENCE = "无要求"
FALLBACK_CALORIES = 350
FALLBACK_TIME = "30分钟"

RECIPE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "difficulty": {"type": "string", "enum": ["简单", "中等", "困难"]},
        "time": {"type": "string"},
        "calories": {"anyOf": [{"type": "integer", "minimum": 0}, {"type": "null"}]},
        "ingredients": {"type": "array", "items": {"type": "string"}},
        "steps": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["name", "difficulty", "time", "calories", "ingredients", "steps"],
    "additionalProperties": False,
}

_logger = logging.getLogger(__name__)


class RecipeClient(Protocol):
    """Interface for an LLM that writes recipes."""

    async def generate(
        self, *, model: str, prompt: str, schema: dict[str, object]
    ) -> dict[str, object]:
        """Return a recipe matching the JSON schema."""


@dataclass(frozen=True)
class GenerationResult:
    """A generated recipe with its computed scores."""

    recipe: GeneratedRecipe
    nutrition: FoodNutrition
    nutrition_score: NutritionScore
    match: MatchResult
    preference_score: int
    fallback: bool


@dataclass
class RecipeGenerationService:
    """Generates a recipe from the user's foods and scores it."""

    client: RecipeClient
    model: str

    async def generate(
        self,
        foods: Sequence[str],
        profile: UserProfile,
        preference: str | None = None,
    ) -> GenerationResult:
        """Generate a recipe, falling back to a template when the client fails."""
        resolved_preference = preference or next(
            iter(profile.preferences), NO_PREFERENCE
        )
        fallback = False
        try:
            raw = await self.client.generate(
                model=self.model,
                prompt=build_prompt(foods, resolved_preference, profile),
                schema=RECIPE_SCHEMA,
            )
            recipe = GeneratedRecipe.model_validate(raw)
        except Exception:
            _logger.exception("Recipe generation failed, using fallback recipe")
            recipe = fallback_recipe(foods, profile)
            fallback = True

        nutrition = aggregate_nutrition(recipe.ingredients)
        return GenerationResult(
            recipe=recipe,
            nutrition=nutrition,
            nutrition_score=nutrition_balance_score(
                nutrition, {"calories": profile.target_calories}
            ),
            match=match_score(list(foods), recipe.ingredients),
            preference_score=preference_score(list(profile.preferences), recipe.tags),
            fallback=fallback,
        )


def build_prompt(foods: Sequence[str], preference: str, profile: UserProfile) -> str:
    """Describe the user's foods and constraints for the model."""
    lines = [
        "请根据以下食材生成一道家常菜食谱。",
        f"可用食材：{'、'.join(foods)}",
        f"口味偏好：{preference}",
        f"烹饪难度：{profile.cooking_difficulty}",
    ]
    if profile.dietary_restrictions:
        lines.append(f"饮食限制：{'、'.join(profile.dietary_restrictions)}")
    lines.append("食材请写明用量，例如“鸡蛋 2个”。")
    return "\n".join(lines)


def fallback_recipe(foods: Sequence[str], profile: UserProfile) -> GeneratedRecipe:
    """Build a simple stir-fry from the first few foods."""
    main = "、".join(foods[:3])
    first = foods[0] if foods else "食材"
    return GeneratedRecipe(
        name=f"{main} 炒菜",
        difficulty=profile.cooking_difficulty,
        time=FALLBACK_TIME,
        calories=FALLBACK_CALORIES,
        ingredients=[f"{food} 适量" for food in foods],
        steps=[
            f"将{first}清洗干净，切好备用",
            "热锅下油，放入调料爆香",
            f"依次加入{main}，翻炒均匀",
            "加入适量调味料，炒至熟透即可",
        ],
    )
