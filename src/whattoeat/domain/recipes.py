"""Domain models for recipes, user profiles and scores."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from whattoeat.domain.nutrition import FoodNutrition, IngredientEntry

DEFAULT_TARGET_CALORIES = 2000


class Difficulty(StrEnum):
    """Cooking difficulty labels as stored on recipes and profiles."""

    EASY = "简单"
    MEDIUM = "中等"
    HARD = "困难"


@dataclass(frozen=True)
class EngagementStats:
    """Engagement counters used for popularity."""

    like_count: float = 0
    collect_count: float = 0
    comment_count: float = 0
    view_count: float = 0
    create_time: datetime | None = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, object]) -> "EngagementStats":
        """Read counters from a record using either naming convention."""
        return cls(
            like_count=_count(row, "like_count", "likeCount"),
            collect_count=_count(row, "collect_count", "collectCount"),
            comment_count=_count(row, "comment_count", "commentCount"),
            view_count=_count(row, "view_count", "viewCount"),
            create_time=parse_timestamp(_first(row, "create_time", "createTime")),
        )


@dataclass(frozen=True)
class RecipeCandidate:
    """A recipe considered for recommendation."""

    id: str | None = None
    name: str = ""
    ingredients: tuple[IngredientEntry, ...] = ()
    tags: Mapping[str, bool] = field(default_factory=dict)
    difficulty: str = Difficulty.EASY
    stats: EngagementStats = field(default_factory=EngagementStats)
    raw: Mapping[str, object] = field(default_factory=dict, compare=False)

    @classmethod
    def from_mapping(cls, row: Mapping[str, object]) -> "RecipeCandidate":
        """Build a candidate from a database row, tolerating missing fields."""
        raw_ingredients = row.get("ingredients")
        ingredients: list[IngredientEntry] = []
        if isinstance(raw_ingredients, list | tuple):
            for item in raw_ingredients:
                entry = IngredientEntry.parse(item)
                if entry is not None:
                    ingredients.append(entry)
        raw_tags = row.get("tags")
        tags = (
            {str(key): value for key, value in raw_tags.items()}
            if isinstance(raw_tags, Mapping)
            else {}
        )
        difficulty = row.get("difficulty")
        identifier = _first(row, "id", "_id")
        name = row.get("name")
        return cls(
            id=str(identifier) if identifier is not None else None,
            name=name if isinstance(name, str) else "",
            ingredients=tuple(ingredients),
            tags=tags,
            difficulty=(
                difficulty
                if isinstance(difficulty, str) and difficulty
                else Difficulty.EASY
            ),
            stats=EngagementStats.from_mapping(row),
            raw=dict(row),
        )

    @property
    def ingredient_labels(self) -> list[str]:
        return [entry.label for entry in self.ingredients]


@dataclass(frozen=True)
class UserProfile:
    """Preference profile supplied per scoring run."""

    preferences: tuple[str, ...] = ()
    dietary_restrictions: tuple[str, ...] = ()
    target_calories: float = DEFAULT_TARGET_CALORIES
    cooking_difficulty: str = Difficulty.EASY

    @classmethod
    def from_mapping(cls, row: Mapping[str, object] | None) -> "UserProfile":
        """Build a profile from a user row, defaulting absent fields."""
        if not row:
            return cls()
        target = _first(row, "target_calories", "targetCalories")
        difficulty = _first(row, "cooking_difficulty", "cookingDifficulty")
        return cls(
            preferences=_strings(row.get("preferences")),
            dietary_restrictions=_strings(
                _first(row, "dietary_restrictions", "dietaryRestrictions")
            ),
            target_calories=(
                float(target)
                if _is_number(target) and target > 0
                else DEFAULT_TARGET_CALORIES
            ),
            cooking_difficulty=(
                difficulty
                if isinstance(difficulty, str) and difficulty
                else Difficulty.EASY
            ),
        )


@dataclass(frozen=True)
class MatchResult:
    """How well a user's foods cover a recipe's ingredients."""

    score: int
    matched: list[str]
    missing: list[str]
    match_ratio: float


@dataclass(frozen=True)
class ScoreBreakdown:
    """Sub-scores and weighted total for a ranked recipe."""

    match: float
    preference: float
    nutrition: float
    popularity: float
    difficulty: float
    total: int


@dataclass(frozen=True)
class RankedRecipe:
    """A candidate together with its scores."""

    candidate: RecipeCandidate
    scores: ScoreBreakdown
    match: MatchResult
    nutrition: FoodNutrition


def parse_timestamp(value: object) -> datetime | None:
    """Parse a datetime, an ISO string or epoch milliseconds; None if unusable."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if _is_number(value):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return None


def _first(row: Mapping[str, object], *keys: str) -> object:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _is_number(value: object) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _count(row: Mapping[str, object], *keys: str) -> float:
    value = _first(row, *keys)
    return value if _is_number(value) and value > 0 else 0


def _strings(value: object) -> tuple[str, ...]:
    if not isinstance(value, list | tuple):
        return ()
    return tuple(item for item in value if isinstance(item, str))
