"""Visibility rules for listing and showing a person's photos."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from photo_sharing.domain.people import Person, Requester
from photo_sharing.domain.photos import (
    Photo,
    PhotoDraft,
    PhotoListing,
    PhotoQuery,
)
from photo_sharing.services.people import PeopleService


class PhotoRepository(Protocol):
    """Persistence interface for photo records."""

    def create_photo(self, draft: PhotoDraft) -> Photo:
        """Persist a new photo and return it with its id."""

    def get_photo(self, photo_id: UUID) -> Photo | None:
        """Return a photo by id, if present."""

    def update_photo(self, photo_id: UUID, changes: dict[str, object]) -> Photo | None:
        """Apply column changes and return the photo, or None if it is gone."""

    def delete_photo(self, photo_id: UUID) -> bool:
        """Delete a photo and return True when a row was removed."""

    def list_photos(self, query: PhotoQuery) -> list[Photo]:
        """Return photos matching the query, newest first."""

    def count_photos(self, query: PhotoQuery) -> int:
        """Return the number of photos matching the query."""


@dataclass
class VisibilityService:
    """Computes which photos of a person a requester may see."""

    photo_repository: PhotoRepository
    people_service: PeopleService

    def query_for(
        self,
        requester: Requester | None,
        person: Person,
        max_time: datetime | None = None,
        limit: int | None = None,
    ) -> PhotoQuery:
        """Build the store query for a requester looking at a person."""
        return PhotoQuery(
            author_id=person.id,
            aspect_ids=self.people_service.aspects_visible_to(requester, person),
            max_time=max_time,
            limit=limit,
        )

    def list_photos(
        self,
        requester: Requester | None,
        person: Person,
        max_time: datetime | None = None,
        limit: int | None = None,
    ) -> PhotoListing:
        """Return visible photos newest first, before ``max_time`` when given.

        The count covers every photo the requester may see, independent of
        cursor and page size, and never includes hidden ones.
        """
        query = self.query_for(requester, person, max_time=max_time, limit=limit)
        photos = self.photo_repository.list_photos(query)
        count = self.photo_repository.count_photos(query.without_cursor())
        return PhotoListing(person=person, photos=photos, count=count)

    def find_photo(
        self, requester: Requester | None, person: Person, photo_id: UUID
    ) -> Photo | None:
        """Return the photo when it exists, belongs to the person and is visible."""
        photo = self.photo_repository.get_photo(photo_id)
        if photo is None:
            return None
        query = self.query_for(requester, person)
        return photo if query.matches(photo) else None
