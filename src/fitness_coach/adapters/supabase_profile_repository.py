"""Supabase-backed user profile repository."""

from dataclasses import dataclass

import httpx
from postgrest import APIError
from supabase import Client

from fitness_coach.domain.errors import ProfileStoreError
from fitness_coach.services.profiles import ProfileRepository

_PROFILE_COLUMNS = (
    "id, first_name, last_name, email, username, "
    "body_data, workout_data, nutrition_data"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for reading user profiles."""

    client: Client

    def get_profile_row(self, user_id: str) -> dict[str, object] | None:
        """Return the raw profile row for a user id, if present."""
        try:
            response = (
                self.client.table("users")
                .select(_PROFILE_COLUMNS)
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise ProfileStoreError(f"Failed to fetch user {user_id}") from exc
        if response.data:
            return response.data[0]
        return None
