"""Photo lifecycle: create, edit, update, destroy and profile designation."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError

from photo_sharing.domain.outcomes import OutcomeKind, PhotoOutcome
from photo_sharing.domain.people import Requester
from photo_sharing.domain.photos import Photo, PhotoDraft, Retraction
from photo_sharing.services.audit import AuditService
from photo_sharing.services.authorization import (
    Decision,
    PhotoAction,
    authorize,
    denial_outcome,
)
from photo_sharing.services.params import (
    ParamsKind,
    PhotoParams,
    ScopeError,
    dropped_fields,
    resolve_scope,
    sanitize_photo_params,
)
from photo_sharing.services.visibility import PhotoRepository

logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for the per-person profile photo designation."""

    def get_profile_photo_id(self, person_id: UUID) -> UUID | None:
        """Return the designated profile photo of a person, if any."""

    def set_profile_photo(self, person_id: UUID, photo_id: UUID) -> None:
        """Replace the person's designation with photo_id in one write."""

    def clear_profile_photo(self, person_id: UUID, photo_id: UUID) -> None:
        """Clear the designation only while it still points at photo_id."""


class RetractionPublisher(Protocol):
    """Announces withdrawn photos to interested parties."""

    async def publish(self, retraction: Retraction) -> None:
        """Deliver a retraction notice."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class PhotoService:
    """Executes photo mutations behind the ownership gate."""

    photo_repository: PhotoRepository
    profile_repository: ProfileRepository
    retraction_publisher: RetractionPublisher
    audit_service: AuditService
    clock: Callable[[], datetime] = field(default=_utcnow)

    def create(
        self, requester: Requester, raw: Mapping[str, object]
    ) -> PhotoOutcome:
        """Create a photo authored by the requester."""
        params, errors = _parse_params(requester, raw, ParamsKind.CREATE)
        if params is None:
            return _invalid(errors)
        if params.pending_media is None:
            return _invalid({"pending_media": "A photo file is required."})
        try:
            scope = resolve_scope(params, requester.aspect_ids)
        except ScopeError as exc:
            return _invalid({"aspect_ids": str(exc)})

        photo = self.photo_repository.create_photo(
            PhotoDraft(
                author_id=requester.person.id,
                scope=scope,
                caption=params.caption,
                pending_media=params.pending_media,
                created_at=self.clock(),
            )
        )
        if params.set_profile_photo:
            self.profile_repository.set_profile_photo(requester.person.id, photo.id)
        self.audit_service.record_photo_event(
            requester.person.id, photo.id, "created", after=photo
        )
        logger.info(
            "Photo created",
            extra={"photo_id": str(photo.id), "author_id": str(photo.author_id)},
        )
        return PhotoOutcome(OutcomeKind.CREATED, photo=photo)

    def get_for_edit(self, requester: Requester, photo_id: UUID) -> PhotoOutcome:
        """Return the photo for its owner's edit view."""
        photo = self.photo_repository.get_photo(photo_id)
        return self._gate(requester, photo, PhotoAction.EDIT) or PhotoOutcome(
            OutcomeKind.OK, photo=photo
        )

    def update(
        self, requester: Requester, photo_id: UUID, raw: Mapping[str, object]
    ) -> PhotoOutcome:
        """Apply caption and scope changes from the owner."""
        photo = self.photo_repository.get_photo(photo_id)
        denied = self._gate(requester, photo, PhotoAction.UPDATE)
        if denied:
            return denied
        params, errors = _parse_params(requester, raw, ParamsKind.UPDATE)
        if params is None:
            return _invalid(errors)
        try:
            scope = resolve_scope(params, requester.aspect_ids, current=photo.scope)
        except ScopeError as exc:
            return _invalid({"aspect_ids": str(exc)})

        changes: dict[str, object] = {}
        if "caption" in params.model_fields_set:
            changes["caption"] = params.caption
        if scope != photo.scope:
            changes["public"] = scope.public
            changes["aspect_ids"] = scope.aspect_ids
        updated = photo
        if changes:
            updated = self.photo_repository.update_photo(photo_id, changes)
            if updated is None:
                return PhotoOutcome(denial_outcome(PhotoAction.UPDATE))
            self.audit_service.record_photo_event(
                requester.person.id, photo_id, "updated", before=photo, after=updated
            )
        if params.set_profile_photo:
            self.profile_repository.set_profile_photo(requester.person.id, photo_id)
            self.audit_service.record_photo_event(
                requester.person.id, photo_id, "profile_photo_set", after=updated
            )
        return PhotoOutcome(OutcomeKind.OK, photo=updated)

    async def destroy(self, requester: Requester, photo_id: UUID) -> PhotoOutcome:
        """Delete an owned photo and announce the retraction once."""
        photo = self.photo_repository.get_photo(photo_id)
        denied = self._gate(requester, photo, PhotoAction.DESTROY)
        if denied:
            return denied
        if not self.photo_repository.delete_photo(photo_id):
            # Another request deleted it first; only that one retracts.
            return PhotoOutcome(OutcomeKind.NOT_FOUND)
        self.profile_repository.clear_profile_photo(requester.person.id, photo_id)
        self.audit_service.record_photo_event(
            requester.person.id, photo_id, "destroyed", before=photo
        )
        logger.info("Photo destroyed", extra={"photo_id": str(photo_id)})

        retraction = Retraction(photo_id=photo_id, author_guid=requester.person.guid)
        try:
            await self.retraction_publisher.publish(retraction)
        except Exception:
            logger.exception(
                "Failed to publish retraction", extra={"photo_id": str(photo_id)}
            )
            event_type = "retraction_failed"
        else:
            event_type = "retraction_sent"
        self.audit_service.record_photo_event(
            requester.person.id, photo_id, event_type
        )
        return PhotoOutcome(OutcomeKind.OK, photo=photo)

    def set_profile_photo(self, requester: Requester, photo_id: UUID) -> PhotoOutcome:
        """Make an owned photo the requester's profile photo."""
        photo = self.photo_repository.get_photo(photo_id)
        if photo is None:
            return PhotoOutcome(OutcomeKind.NOT_FOUND)
        denied = self._gate(requester, photo, PhotoAction.SET_PROFILE_PHOTO)
        if denied:
            return denied
        self.profile_repository.set_profile_photo(requester.person.id, photo_id)
        self.audit_service.record_photo_event(
            requester.person.id, photo_id, "profile_photo_set", after=photo
        )
        return PhotoOutcome(OutcomeKind.OK, photo=photo)

    def _gate(
        self, requester: Requester, photo: Photo | None, action: PhotoAction
    ) -> PhotoOutcome | None:
        if authorize(requester, photo, action) is Decision.ALLOW:
            return None
        logger.warning(
            "Photo action denied",
            extra={
                "action": str(action),
                "requester_id": str(requester.person.id),
                "photo_id": str(photo.id) if photo else None,
            },
        )
        return PhotoOutcome(denial_outcome(action))


def _parse_params(
    requester: Requester, raw: Mapping[str, object], kind: ParamsKind
) -> tuple[PhotoParams | None, dict[str, str]]:
    ignored = dropped_fields(raw, kind)
    if ignored:
        logger.warning(
            "Ignored protected photo fields",
            extra={"requester_id": str(requester.person.id), "fields": ignored},
        )
    try:
        return PhotoParams.model_validate(sanitize_photo_params(raw, kind)), {}
    except ValidationError as exc:
        return None, {
            str(error["loc"][0]) if error["loc"] else "photo": error["msg"]
            for error in exc.errors()
        }


def _invalid(errors: dict[str, str]) -> PhotoOutcome:
    return PhotoOutcome(OutcomeKind.VALIDATION_FAILURE, errors=errors)
