"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from whattoeat.adapters.openai_recipe_client import OpenAIRecipeClient
from whattoeat.adapters.supabase_cache_repository import SupabaseCacheRepository
from whattoeat.adapters.supabase_food_repository import SupabaseFoodRepository
from whattoeat.adapters.supabase_profile_repository import SupabaseProfileRepository
from whattoeat.adapters.supabase_rate_limit_repository import (
    SupabaseRateLimitRepository,
)
from whattoeat.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from whattoeat.config import Settings
from whattoeat.services.cache import DocumentCache
from whattoeat.services.generation import RecipeGenerationService
from whattoeat.services.rate_limit import RateLimiter
from whattoeat.services.ranking import (
    INVENTORY_RECOMMEND_WEIGHTS,
    RankingOptions,
    RecipeRanker,
)
from whattoeat.services.recommendations import RecommendationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    rate_limiter: RateLimiter
    recommendation_service: RecommendationService
    generation_service: RecipeGenerationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    cache = DocumentCache(
        SupabaseCacheRepository(
            supabase_client, table_name=resolved_settings.cache_table
        )
    )
    recommendation_service = RecommendationService(
        food_repository=SupabaseFoodRepository(supabase_client),
        profile_repository=SupabaseProfileRepository(supabase_client),
        recipe_repository=SupabaseRecipeRepository(supabase_client),
        ranker=RecipeRanker(RankingOptions(weights=INVENTORY_RECOMMEND_WEIGHTS)),
        cache=cache,
        candidate_limit=resolved_settings.recipe_candidate_limit,
        candidate_ttl_seconds=resolved_settings.recipe_candidate_ttl_seconds,
    )
    recipe_client = OpenAIRecipeClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    generation_service = RecipeGenerationService(
        client=recipe_client,
        model=resolved_settings.openai_model,
    )
    rate_limiter = RateLimiter(SupabaseRateLimitRepository(supabase_client))

    async def close_resources() -> None:
        await recipe_client.close()

    return AppContainer(
        settings=resolved_settings,
        rate_limiter=rate_limiter,
        recommendation_service=recommendation_service,
        generation_service=generation_service,
        close_resources=close_resources,
    )
