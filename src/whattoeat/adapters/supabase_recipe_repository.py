"""Supabase repository for published recipes."""

from dataclasses import dataclass

from supabase import Client

from whattoeat.services.recommendations import RecipeRepository

_RECIPE_COLUMNS = (
    "id, name, ingredients, tags, difficulty, like_count, collect_count, "
    "comment_count, view_count, create_time"
)


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for recipe candidate reads."""

    client: Client

    def list_public_recipes(self, limit: int) -> list[dict[str, object]]:
        """Return public, non-deleted recipes, newest first."""
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .eq("is_deleted", False)
            .eq("is_public", True)
            .order("create_time", desc=True)
            .limit(limit)
            .execute()
        )
        return list(response.data or [])
