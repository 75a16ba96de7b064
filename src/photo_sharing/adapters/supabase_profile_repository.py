"""Supabase-backed profile photo designation."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from photo_sharing.services.photos import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Stores the designated photo on the person's single profile row."""

    client: Client

    def get_profile_photo_id(self, person_id: UUID) -> UUID | None:
        """Return the designated photo id, if any."""
        response = (
            self.client.table("profiles")
            .select("photo_id")
            .eq("person_id", str(person_id))
            .limit(1)
            .execute()
        )
        if not response.data or not response.data[0].get("photo_id"):
            return None
        return UUID(response.data[0]["photo_id"])

    def set_profile_photo(self, person_id: UUID, photo_id: UUID) -> None:
        """Upsert the profile row so the old designation is replaced atomically."""
        self.client.table("profiles").upsert(
            {
                "person_id": str(person_id),
                "photo_id": str(photo_id),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="person_id",
        ).execute()

    def clear_profile_photo(self, person_id: UUID, photo_id: UUID) -> None:
        """Clear the designation if it still points at the photo."""
        self.client.table("profiles").update(
            {"photo_id": None, "updated_at": datetime.now(tz=UTC).isoformat()}
        ).eq("person_id", str(person_id)).eq("photo_id", str(photo_id)).execute()
