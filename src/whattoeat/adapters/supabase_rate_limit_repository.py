"""Supabase repository for rate limit request logs."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from whattoeat.services.rate_limit import RateLimitRepository

_TABLE = "rate_limit_logs"


@dataclass
class SupabaseRateLimitRepository(RateLimitRepository):
    """Supabase implementation for request logs."""

    client: Client

    def list_since(
        self, user_id: str, function_name: str, since: datetime
    ) -> list[datetime]:
        """Return request timestamps in the window, newest first."""
        response = (
            self.client.table(_TABLE)
            .select("requested_at")
            .eq("user_id", user_id)
            .eq("function_name", function_name)
            .gte("requested_at", since.isoformat())
            .order("requested_at", desc=True)
            .execute()
        )
        return [
            datetime.fromisoformat(row["requested_at"])
            for row in response.data or []
            if isinstance(row.get("requested_at"), str)
        ]

    def count_since(self, user_id: str, function_name: str, since: datetime) -> int:
        """Count requests in the window."""
        response = (
            self.client.table(_TABLE)
            .select("id", count="exact")
            .eq("user_id", user_id)
            .eq("function_name", function_name)
            .gte("requested_at", since.isoformat())
            .execute()
        )
        if response.count is not None:
            return response.count
        return len(response.data or [])

    def record(self, user_id: str, function_name: str, at: datetime) -> None:
        """Store a request timestamp."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "user_id": user_id,
                    "function_name": function_name,
                    "requested_at": at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to record request in Supabase")

    def delete_before(
        self, user_id: str, function_name: str, before: datetime
    ) -> int:
        """Delete requests older than the window."""
        response = (
            self.client.table(_TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("function_name", function_name)
            .lt("requested_at", before.isoformat())
            .execute()
        )
        return len(response.data or [])
