"""Supabase repository for a user's food inventory."""

from dataclasses import dataclass

from supabase import Client

from whattoeat.services.recommendations import FoodRepository


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for inventory reads."""

    client: Client

    def list_food_names(self, user_id: str) -> list[str]:
        """Return names of foods that are neither deleted nor expired."""
        response = (
            self.client.table("food_items")
            .select("name")
            .eq("user_id", user_id)
            .eq("is_deleted", False)
            .neq("status", "expired")
            .execute()
        )
        return [
            row["name"]
            for row in response.data or []
            if isinstance(row.get("name"), str) and row["name"]
        ]
