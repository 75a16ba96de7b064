"""Tests for the mass-assignment guard and scope resolution."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from photo_sharing.domain.photos import PhotoScope
from photo_sharing.services.params import (
    ParamsKind,
    PhotoParams,
    ScopeError,
    dropped_fields,
    resolve_scope,
    sanitize_photo_params,
)


def test_sanitize_drops_author_overrides_silently() -> None:
    raw = {
        "caption": "now with lasers!",
        "author": "mallory",
        "author_id": str(uuid4()),
        "owner_id": str(uuid4()),
        "pending_media": "uploads/a.png",
    }

    sanitized = sanitize_photo_params(raw, ParamsKind.CREATE)

    assert sanitized == {"caption": "now with lasers!", "pending_media": "uploads/a.png"}
    assert dropped_fields(raw, ParamsKind.CREATE) == ["author", "author_id", "owner_id"]


def test_sanitize_is_identity_on_allowed_fields() -> None:
    raw = {"caption": "hi", "aspect_ids": "all", "set_profile_photo": True}

    once = sanitize_photo_params(raw, ParamsKind.UPDATE)

    assert once == raw
    assert sanitize_photo_params(once, ParamsKind.UPDATE) == once


def test_update_guard_rejects_media_swap() -> None:
    raw = {"pending_media": "uploads/other.png", "caption": "x"}

    assert sanitize_photo_params(raw, ParamsKind.UPDATE) == {"caption": "x"}


def test_photo_params_treats_blank_media_as_missing() -> None:
    params = PhotoParams.model_validate({"pending_media": "   "})

    assert params.pending_media is None


def test_photo_params_rejects_wrong_types() -> None:
    with pytest.raises(ValidationError):
        PhotoParams.model_validate({"aspect_ids": "friends"})


def test_resolve_scope_defaults_to_all_owned_aspects_on_create() -> None:
    owned = frozenset({uuid4(), uuid4()})

    scope = resolve_scope(PhotoParams(), owned)

    assert scope == PhotoScope(public=False, aspect_ids=owned)


def test_resolve_scope_public_keyword() -> None:
    scope = resolve_scope(PhotoParams(aspect_ids="public"), frozenset({uuid4()}))

    assert scope.public is True
    assert scope.aspect_ids == frozenset()


def test_resolve_scope_drops_foreign_aspects() -> None:
    mine = uuid4()
    params = PhotoParams(aspect_ids=[mine, uuid4()])

    scope = resolve_scope(params, frozenset({mine}))

    assert scope.aspect_ids == frozenset({mine})


def test_resolve_scope_rejects_only_foreign_aspects() -> None:
    with pytest.raises(ScopeError):
        resolve_scope(PhotoParams(aspect_ids=[uuid4()]), frozenset({uuid4()}))


def test_resolve_scope_keeps_current_scope_on_caption_only_update() -> None:
    current = PhotoScope(public=True, aspect_ids=frozenset())

    scope = resolve_scope(PhotoParams(caption="new"), frozenset({uuid4()}), current)

    assert scope is current


def test_resolve_scope_public_flag_alongside_aspects() -> None:
    mine = uuid4()
    params = PhotoParams(aspect_ids=[mine], public=True)

    scope = resolve_scope(params, frozenset({mine}))

    assert scope == PhotoScope(public=True, aspect_ids=frozenset({mine}))
