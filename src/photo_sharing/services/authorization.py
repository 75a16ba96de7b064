"""Ownership gate for single-photo actions."""

from enum import StrEnum

from photo_sharing.domain.outcomes import OutcomeKind
from photo_sharing.domain.people import Requester
from photo_sharing.domain.photos import Photo


class PhotoAction(StrEnum):
    """Single-photo actions that require ownership."""

    EDIT = "edit"
    UPDATE = "update"
    DESTROY = "destroy"
    SET_PROFILE_PHOTO = "set_profile_photo"


class Decision(StrEnum):
    """Result of an ownership check."""

    ALLOW = "allow"
    DENY = "deny"


_DENIALS: dict[PhotoAction, OutcomeKind] = {
    PhotoAction.EDIT: OutcomeKind.FORBIDDEN_REDIRECT,
    PhotoAction.UPDATE: OutcomeKind.FORBIDDEN_REDIRECT,
    PhotoAction.DESTROY: OutcomeKind.NOT_FOUND,
    PhotoAction.SET_PROFILE_PHOTO: OutcomeKind.FORBIDDEN_STATUS,
}


def authorize(
    requester: Requester | None, photo: Photo | None, action: PhotoAction
) -> Decision:
    """Allow the action only when the requester authored the photo.

    A missing photo is denied like a foreign one; callers rely on that to
    answer both cases identically.
    """
    if requester is None or photo is None:
        return Decision.DENY
    if requester.person.id == photo.author_id:
        return Decision.ALLOW
    return Decision.DENY


def denial_outcome(action: PhotoAction) -> OutcomeKind:
    """Return the outcome a denied action reports to the caller."""
    return _DENIALS[action]
