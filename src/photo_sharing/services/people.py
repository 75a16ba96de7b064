"""Person lookups and requester identity."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from photo_sharing.domain.people import Person, Requester


class PersonRepository(Protocol):
    """Persistence interface for people and their aspects."""

    def get_by_guid(self, guid: str) -> Person | None:
        """Return the person with a public guid, if present."""

    def list_aspect_ids(self, person_id: UUID) -> frozenset[UUID]:
        """Return the ids of every aspect the person owns."""

    def aspect_ids_with_member(
        self, owner_id: UUID, member_id: UUID
    ) -> frozenset[UUID]:
        """Return the owner's aspects that contain the member."""


class IdentityProvider(Protocol):
    """Resolves a request credential to the requester behind it."""

    def resolve(self, token: str) -> Requester | None:
        """Return the requester for a bearer token, or None when unknown."""


@dataclass
class PeopleService:
    """Application service for person lookups."""

    repository: PersonRepository

    def find_by_guid(self, guid: str) -> Person | None:
        """Return the person for a guid, if present."""
        return self.repository.get_by_guid(guid)

    def aspects_visible_to(
        self, requester: Requester | None, person: Person
    ) -> frozenset[UUID] | None:
        """Return the person's aspects through which the requester sees photos.

        ``None`` means the requester is the person and sees everything;
        an empty set means public photos only.
        """
        if requester is None:
            return frozenset()
        if requester.person.id == person.id:
            return None
        return self.repository.aspect_ids_with_member(person.id, requester.person.id)
