"""Supabase repository for user preference profiles."""

from dataclasses import dataclass

from supabase import Client

from whattoeat.domain.recipes import UserProfile
from whattoeat.services.recommendations import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile reads."""

    client: Client

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile, if the user exists."""
        response = (
            self.client.table("users")
            .select(
                "preferences, dietary_restrictions, target_calories, cooking_difficulty"
            )
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return UserProfile.from_mapping(response.data[0])
