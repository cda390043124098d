"""Recommendation of existing recipes from a user's food inventory."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from whattoeat.domain.recipes import RankedRecipe, RecipeCandidate, UserProfile
from whattoeat.services.cache import DocumentCache
from whattoeat.services.preferences import PREFERENCE_RULES
from whattoeat.services.ranking import RecipeRanker

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Read access to a user's food inventory."""

    def list_food_names(self, user_id: str) -> list[str]:
        """Return names of the user's foods that are neither deleted nor expired."""


class ProfileRepository(Protocol):
    """Read access to user preference profiles."""

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile, if the user exists."""


class RecipeRepository(Protocol):
    """Read access to published recipes."""

    def list_public_recipes(self, limit: int) -> list[dict[str, object]]:
        """Return public, non-deleted recipe rows, newest first."""


@dataclass
class RecommendationService:
    """Gathers inventory, profile and candidates, then ranks them."""

    food_repository: FoodRepository
    profile_repository: ProfileRepository
    recipe_repository: RecipeRepository
    ranker: RecipeRanker
    cache: DocumentCache | None = None
    candidate_limit: int = 100
    candidate_ttl_seconds: int = 300

    def get_user_foods(self, user_id: str) -> list[str]:
        """Return the user's inventory; empty when it cannot be read."""
        try:
            return self.food_repository.list_food_names(user_id)
        except Exception:
            _logger.exception("Failed to load foods: user=%s", user_id)
            return []

    def get_profile(self, user_id: str) -> UserProfile:
        """Return the user's profile, defaulting every field on failure."""
        try:
            profile = self.profile_repository.get_profile(user_id)
        except Exception:
            _logger.exception("Failed to load profile: user=%s", user_id)
            return UserProfile()
        return profile or UserProfile()

    def get_candidates(self, preferences: Sequence[str]) -> list[RecipeCandidate]:
        """Return candidates, keeping those tagged with a preferred tag if any."""
        candidates = [
            RecipeCandidate.from_mapping(row)
            for row in self._load_rows()
            if isinstance(row, dict)
        ]
        wanted = _preferred_tags(preferences)
        if not wanted:
            return candidates
        return [
            candidate
            for candidate in candidates
            if any(candidate.tags.get(tag) is True for tag in wanted)
        ]

    def recommend(
        self,
        user_id: str,
        now: datetime,
        foods: Sequence[str] | None = None,
        limit: int = 10,
        profile: UserProfile | None = None,
    ) -> list[RankedRecipe]:
        """Rank candidates for the user's foods (or the given ones)."""
        profile = profile or self.get_profile(user_id)
        user_foods = list(foods) if foods else self.get_user_foods(user_id)
        candidates = self.get_candidates(profile.preferences)
        if not candidates:
            return []
        return self.ranker.rank(user_foods, profile, candidates, now, limit)

    def _load_rows(self) -> list[object]:
        cache_key = f"recipes:public:{self.candidate_limit}"
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if isinstance(cached, list):
                return cached
        try:
            rows = self.recipe_repository.list_public_recipes(self.candidate_limit)
        except Exception:
            _logger.exception("Failed to load recipe candidates")
            return []
        if self.cache is not None and rows:
            try:
                self.cache.set(cache_key, rows, ttl_seconds=self.candidate_ttl_seconds)
            except Exception:
                _logger.warning("Failed to cache recipe candidates")
        return rows


def _preferred_tags(preferences: Sequence[str]) -> set[str]:
    tags: set[str] = set()
    for preference in preferences:
        rule = PREFERENCE_RULES.get(preference)
        tags.add(rule.tag if rule else preference)
    return tags
