"""Composite scoring and ranking of recipe candidates."""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from whattoeat.domain.recipes import (
    Difficulty,
    RankedRecipe,
    RecipeCandidate,
    ScoreBreakdown,
    UserProfile,
)
from whattoeat.services.matching import IngredientMatcher, SubstringMatcher, match_score
from whattoeat.services.nutrition import aggregate_nutrition, calorie_fit_score
from whattoeat.services.popularity import (
    DEFAULT_POPULARITY,
    PopularityOptions,
    popularity_score,
    saturate,
)
from whattoeat.services.preferences import preference_score
from whattoeat.services.rounding import round_half_up

DIFFICULTY_LEVELS = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
}
UNKNOWN_RECIPE_LEVEL = 2
UNKNOWN_USER_LEVEL = 1
DIFFICULTY_STEP_PENALTY = 30

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreWeights:
    """Weights applied to each sub-score in the total."""

    match_weight: float = 0.3
    preference_weight: float = 0.25
    nutrition_weight: float = 0.2
    popularity_weight: float = 0.15
    difficulty_weight: float = 0.1


DEFAULT_WEIGHTS = ScoreWeights()

# Ranking a user's inventory against existing recipes ignores popularity.
INVENTORY_RECOMMEND_WEIGHTS = ScoreWeights(
    match_weight=0.35,
    preference_weight=0.25,
    nutrition_weight=0.2,
    popularity_weight=0,
    difficulty_weight=0.2,
)


@dataclass(frozen=True)
class SubScores:
    """Inputs to the weighted total."""

    match_score: float = 0
    preference_score: float = 0
    nutrition_score: float = 0
    popularity_score: float = 0
    difficulty_score: float = 0

    @classmethod
    def from_mapping(cls, scores: Mapping[str, object]) -> "SubScores":
        """Read sub-scores from camelCase or snake_case keys; missing means 0."""
        return cls(
            match_score=_score(scores, "match_score", "matchScore"),
            preference_score=_score(scores, "preference_score", "preferenceScore"),
            nutrition_score=_score(scores, "nutrition_score", "nutritionScore"),
            popularity_score=_score(scores, "popularity_score", "popularityScore"),
            difficulty_score=_score(scores, "difficulty_score", "difficultyScore"),
        )


@dataclass(frozen=True)
class RankingOptions:
    """Configuration for a ranking run."""

    weights: ScoreWeights = DEFAULT_WEIGHTS
    popularity: PopularityOptions = DEFAULT_POPULARITY
    # When set, popularity is mapped onto 0-100 with this half-point.
    popularity_half_point: float | None = None


def total_score(
    scores: SubScores | Mapping[str, object], weights: ScoreWeights | None = None
) -> int:
    """Weighted sum of sub-scores, rounded to an integer."""
    if not isinstance(scores, SubScores):
        scores = SubScores.from_mapping(scores)
    resolved = weights or DEFAULT_WEIGHTS
    total = (
        scores.match_score * resolved.match_weight
        + scores.preference_score * resolved.preference_weight
        + scores.nutrition_score * resolved.nutrition_weight
        + scores.popularity_score * resolved.popularity_weight
        + scores.difficulty_score * resolved.difficulty_weight
    )
    return round_half_up(total)


def difficulty_fit(recipe_difficulty: object, user_difficulty: object) -> int:
    """Score 100 for the user's preferred difficulty, less per level away."""
    recipe_level = _level(recipe_difficulty, UNKNOWN_RECIPE_LEVEL)
    user_level = _level(user_difficulty, UNKNOWN_USER_LEVEL)
    if recipe_level == user_level:
        return 100
    return max(0, 100 - abs(recipe_level - user_level) * DIFFICULTY_STEP_PENALTY)


@dataclass
class RecipeRanker:
    """Scores candidates against a user's foods and profile."""

    options: RankingOptions = field(default_factory=RankingOptions)
    matcher: IngredientMatcher = field(default_factory=SubstringMatcher)

    def score(
        self,
        user_foods: Sequence[str],
        profile: UserProfile,
        candidate: RecipeCandidate,
        now: datetime,
    ) -> RankedRecipe:
        """Compute every sub-score and the weighted total for one candidate."""
        match = match_score(user_foods, candidate.ingredient_labels, self.matcher)
        preference = preference_score(list(profile.preferences), candidate.tags)
        nutrition = aggregate_nutrition(list(candidate.ingredients))
        nutrition_score = calorie_fit_score(
            nutrition.calories, profile.target_calories
        )
        popularity: float = popularity_score(
            candidate.stats, now, self.options.popularity
        )
        if self.options.popularity_half_point is not None:
            popularity = saturate(popularity, self.options.popularity_half_point)
        difficulty = difficulty_fit(candidate.difficulty, profile.cooking_difficulty)

        total = total_score(
            SubScores(
                match_score=match.score,
                preference_score=preference,
                nutrition_score=nutrition_score,
                popularity_score=popularity,
                difficulty_score=difficulty,
            ),
            self.options.weights,
        )
        return RankedRecipe(
            candidate=candidate,
            scores=ScoreBreakdown(
                match=match.score,
                preference=preference,
                nutrition=nutrition_score,
                popularity=popularity,
                difficulty=difficulty,
                total=total,
            ),
            match=match,
            nutrition=nutrition,
        )

    def rank(
        self,
        user_foods: Sequence[str],
        profile: UserProfile,
        candidates: Sequence[RecipeCandidate | Mapping[str, object]],
        now: datetime,
        limit: int | None = None,
    ) -> list[RankedRecipe]:
        """Score all candidates and return the best first.

        Equal totals keep their original candidate order.
        """
        ranked = []
        for raw in candidates or []:
            if isinstance(raw, RecipeCandidate):
                candidate = raw
            elif isinstance(raw, Mapping):
                candidate = RecipeCandidate.from_mapping(raw)
            else:
                _logger.warning("Skipping malformed recipe candidate: %r", raw)
                continue
            ranked.append(self.score(user_foods, profile, candidate, now))

        ranked.sort(key=lambda item: item.scores.total, reverse=True)
        if limit is None:
            return ranked
        return ranked[: max(limit, 0)]


def _level(label: object, default: int) -> int:
    if not isinstance(label, str):
        return default
    return DIFFICULTY_LEVELS.get(label, default)


def _score(scores: Mapping[str, object], *keys: str) -> float:
    for key in keys:
        value = scores.get(key)
        if (
            isinstance(value, int | float)
            and not isinstance(value, bool)
            and math.isfinite(value)
        ):
            return value
    return 0
