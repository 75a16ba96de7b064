"""Tagged results returned by the photo lifecycle handler."""

from dataclasses import dataclass
from enum import StrEnum

from photo_sharing.domain.photos import Photo


class OutcomeKind(StrEnum):
    """Terminal result of a photo operation."""

    OK = "ok"
    CREATED = "created"
    NOT_FOUND = "not_found"
    FORBIDDEN_REDIRECT = "forbidden_redirect"
    FORBIDDEN_STATUS = "forbidden_status"
    VALIDATION_FAILURE = "validation_failure"


@dataclass(frozen=True)
class PhotoOutcome:
    """Outcome kind plus the affected photo or validation errors."""

    kind: OutcomeKind
    photo: Photo | None = None
    errors: dict[str, str] | None = None
