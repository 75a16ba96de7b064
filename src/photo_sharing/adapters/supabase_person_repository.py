"""Supabase-backed people and aspect lookups."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from photo_sharing.domain.people import Person
from photo_sharing.services.people import PersonRepository


@dataclass
class SupabasePersonRepository(PersonRepository):
    """Supabase implementation for people, aspects and memberships."""

    client: Client

    def get_by_guid(self, guid: str) -> Person | None:
        """Return the person for a guid, if present."""
        response = (
            self.client.table("people")
            .select("id, guid, name")
            .eq("guid", guid)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_person(response.data[0])

    def get_by_user_id(self, user_id: str) -> Person | None:
        """Return the person linked to an auth user, if present."""
        response = (
            self.client.table("people")
            .select("id, guid, name")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_person(response.data[0])

    def list_aspect_ids(self, person_id: UUID) -> frozenset[UUID]:
        """Return the ids of the person's aspects."""
        response = (
            self.client.table("aspects")
            .select("id")
            .eq("person_id", str(person_id))
            .execute()
        )
        return frozenset(UUID(row["id"]) for row in response.data or [])

    def aspect_ids_with_member(
        self, owner_id: UUID, member_id: UUID
    ) -> frozenset[UUID]:
        """Return the owner's aspects that list the member."""
        owned = self.list_aspect_ids(owner_id)
        if not owned:
            return frozenset()
        response = (
            self.client.table("aspect_memberships")
            .select("aspect_id")
            .eq("person_id", str(member_id))
            .in_("aspect_id", [str(aspect_id) for aspect_id in owned])
            .execute()
        )
        return frozenset(UUID(row["aspect_id"]) for row in response.data or [])


def _row_to_person(row: dict[str, object]) -> Person:
    return Person(id=UUID(str(row["id"])), guid=str(row["guid"]), name=row.get("name"))  # type: ignore[arg-type]
