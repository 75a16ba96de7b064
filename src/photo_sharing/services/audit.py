"""Audit trail for photo mutations."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from photo_sharing.domain.photos import Photo


class AuditRepository(Protocol):
    """Persistence interface for audit events."""

    def create_event(  # noqa: PLR0913
        self,
        actor_id: UUID,
        entity_type: str,
        entity_id: UUID,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        """Create an audit event row."""


@dataclass
class AuditService:
    """Records who changed which photo and how."""

    repository: AuditRepository

    def record_photo_event(
        self,
        actor_id: UUID,
        photo_id: UUID,
        event_type: str,
        before: Photo | None = None,
        after: Photo | None = None,
    ) -> None:
        """Persist an audit event for a photo, snapshotting both states."""
        self.repository.create_event(
            actor_id=actor_id,
            entity_type="photo",
            entity_id=photo_id,
            event_type=event_type,
            before=snapshot_photo(before) if before else None,
            after=snapshot_photo(after) if after else None,
        )


def snapshot_photo(photo: Photo) -> dict[str, object]:
    """Return a JSON-safe snapshot of a photo."""
    return {
        "id": str(photo.id),
        "author_id": str(photo.author_id),
        "public": photo.public,
        "aspect_ids": sorted(str(aspect_id) for aspect_id in photo.aspect_ids),
        "caption": photo.caption,
        "created_at": photo.created_at.isoformat(),
    }
