"""Mass-assignment guard and typed parameters for photo mutations."""

from collections.abc import Mapping
from enum import StrEnum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from photo_sharing.domain.photos import PhotoScope


class ParamsKind(StrEnum):
    """Which mutation a payload is destined for."""

    CREATE = "create"
    UPDATE = "update"


_MUTABLE_FIELDS = frozenset({"caption", "aspect_ids", "public", "set_profile_photo"})

# Author, id and timestamps are never listed here; they come from the
# authenticated requester and the store.
_ALLOWED_FIELDS: dict[ParamsKind, frozenset[str]] = {
    ParamsKind.CREATE: _MUTABLE_FIELDS | {"pending_media"},
    ParamsKind.UPDATE: _MUTABLE_FIELDS,
}


def sanitize_photo_params(
    raw: Mapping[str, object], kind: ParamsKind
) -> dict[str, object]:
    """Return only the allow-listed fields of a raw payload, values untouched."""
    allowed = _ALLOWED_FIELDS[kind]
    return {key: value for key, value in raw.items() if key in allowed}


def dropped_fields(raw: Mapping[str, object], kind: ParamsKind) -> list[str]:
    """Return the raw payload keys the guard would discard."""
    allowed = _ALLOWED_FIELDS[kind]
    return sorted(str(key) for key in raw if key not in allowed)


class PhotoParams(BaseModel):
    """Typed view of a sanitized photo payload."""

    model_config = ConfigDict(extra="forbid")

    caption: str | None = None
    aspect_ids: Literal["all", "public"] | list[UUID] | None = None
    public: bool | None = None
    set_profile_photo: bool = False
    pending_media: str | None = None

    @field_validator("pending_media")
    @classmethod
    def _blank_media_is_missing(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class ScopeError(ValueError):
    """Raised when a payload resolves to a scope nobody can see."""


def resolve_scope(
    params: PhotoParams,
    owned_aspect_ids: frozenset[UUID],
    current: PhotoScope | None = None,
) -> PhotoScope:
    """Resolve the scope fields of a payload against the owner's aspects.

    ``current`` is the existing scope on update. Aspect ids the owner does
    not own are dropped. With no scope fields at all, an update keeps the
    current scope and a create shares with every aspect of the owner.
    """
    if params.aspect_ids is None and params.public is None:
        return current or PhotoScope(public=False, aspect_ids=owned_aspect_ids)

    public = False
    if params.aspect_ids == "public":
        aspect_ids: frozenset[UUID] = frozenset()
        public = True
    elif params.aspect_ids == "all":
        aspect_ids = owned_aspect_ids
    elif params.aspect_ids is None:
        aspect_ids = current.aspect_ids if current else owned_aspect_ids
    else:
        aspect_ids = frozenset(
            aspect_id for aspect_id in params.aspect_ids if aspect_id in owned_aspect_ids
        )

    if params.public is not None and params.aspect_ids != "public":
        public = params.public
    if not public and not aspect_ids:
        raise ScopeError("Select at least one aspect or share publicly.")
    return PhotoScope(public=public, aspect_ids=aspect_ids)
