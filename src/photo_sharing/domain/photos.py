"""Domain models for photos and photo listings."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from photo_sharing.domain.people import Person


@dataclass(frozen=True)
class PhotoScope:
    """Who a photo is shared with: everyone, or a set of the author's aspects."""

    public: bool
    aspect_ids: frozenset[UUID]


@dataclass(frozen=True)
class PhotoDraft:
    """Photo fields assembled before the store assigns an id."""

    author_id: UUID
    scope: PhotoScope
    caption: str | None
    pending_media: str
    created_at: datetime


@dataclass(frozen=True)
class Photo:
    """Represents a persisted photo."""

    id: UUID
    author_id: UUID
    public: bool
    aspect_ids: frozenset[UUID]
    caption: str | None
    pending_media: str
    created_at: datetime

    @property
    def scope(self) -> PhotoScope:
        return PhotoScope(public=self.public, aspect_ids=self.aspect_ids)


@dataclass(frozen=True)
class PhotoQuery:
    """Filter for the photos of one author as seen by one requester.

    ``aspect_ids`` is ``None`` for the author's own view (no visibility
    filter). Otherwise it holds the author's aspects the requester belongs to;
    an empty set limits the query to public photos.
    """

    author_id: UUID
    aspect_ids: frozenset[UUID] | None
    max_time: datetime | None = None
    limit: int | None = None

    def matches(self, photo: Photo) -> bool:
        """Return True when the photo falls inside this query, ignoring limit."""
        if photo.author_id != self.author_id:
            return False
        if self.max_time is not None and photo.created_at >= self.max_time:
            return False
        if self.aspect_ids is None or photo.public:
            return True
        return bool(photo.aspect_ids & self.aspect_ids)

    def without_cursor(self) -> "PhotoQuery":
        """Return the same visibility filter with no cursor and no limit."""
        return PhotoQuery(author_id=self.author_id, aspect_ids=self.aspect_ids)


@dataclass(frozen=True)
class PhotoListing:
    """Visible photos of a person plus the total the requester may see."""

    person: Person
    photos: list[Photo]
    count: int


@dataclass(frozen=True)
class Retraction:
    """Notice that a shared photo was withdrawn."""

    photo_id: UUID
    author_guid: str
    target_type: str = "Photo"
