"""Photo endpoints."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import Response

from photo_sharing.api.identity import (
    current_requester,
    representation,
    require_requester,
)
from photo_sharing.api.negotiation import Representation
from photo_sharing.api.views import (
    listing_response,
    listing_url,
    message_response,
    no_content_response,
    photo_response,
    photo_url,
    redirect_response,
)
from photo_sharing.domain.outcomes import OutcomeKind, PhotoOutcome
from photo_sharing.domain.people import Requester

if TYPE_CHECKING:
    from photo_sharing.containers import AppContainer

router = APIRouter(tags=["photos"])

_UNPROCESSABLE = 422


@router.post("/photos")
async def create_photo(
    request: Request,
    body: dict[str, object] = Body(default_factory=dict),
    requester: Requester = Depends(require_requester),
    rep: Representation = Depends(representation),
) -> Response:
    """Create a photo authored by the requester."""
    container: AppContainer = request.app.state.container
    outcome = container.photo_service.create(requester, _photo_params(body))
    if outcome.kind is OutcomeKind.CREATED and outcome.photo:
        return photo_response(outcome.photo, rep, status.HTTP_201_CREATED)
    return _failure(outcome, requester, rep)


@router.get("/people/{guid}/photos")
async def list_photos(
    guid: str,
    request: Request,
    max_time: int | None = None,
    requester: Requester | None = Depends(current_requester),
    rep: Representation = Depends(representation),
) -> Response:
    """List the photos of a person that the requester may see."""
    container: AppContainer = request.app.state.container
    person = container.people_service.find_by_guid(guid)
    if person is None:
        return message_response(status.HTTP_404_NOT_FOUND, "Not found", rep)
    cursor = None
    if max_time is not None:
        try:
            cursor = datetime.fromtimestamp(max_time, tz=UTC)
        except (ValueError, OverflowError, OSError):
            return message_response(
                _UNPROCESSABLE, "Invalid photo", rep, {"max_time": "Out of range"}
            )
    listing = container.visibility_service.list_photos(
        requester,
        person,
        max_time=cursor,
        limit=container.settings.photos_per_page,
    )
    return listing_response(listing, rep)


@router.get("/people/{guid}/photos/{photo_id}")
async def show_photo(
    guid: str,
    photo_id: str,
    request: Request,
    requester: Requester | None = Depends(current_requester),
    rep: Representation = Depends(representation),
) -> Response:
    """Show one photo; absent and hidden photos look the same."""
    container: AppContainer = request.app.state.container
    person = container.people_service.find_by_guid(guid)
    parsed_id = _parse_uuid(photo_id)
    photo = None
    if person is not None and parsed_id is not None:
        photo = container.visibility_service.find_photo(requester, person, parsed_id)
    if photo is None:
        return message_response(status.HTTP_404_NOT_FOUND, "Not found", rep)
    return photo_response(photo, rep)


@router.get("/photos/{photo_id}/edit")
async def edit_photo(
    photo_id: str,
    request: Request,
    requester: Requester = Depends(require_requester),
    rep: Representation = Depends(representation),
) -> Response:
    """Return the owner's edit view of a photo."""
    container: AppContainer = request.app.state.container
    parsed_id = _parse_uuid(photo_id)
    if parsed_id is None:
        return redirect_response(listing_url(requester.person), rep)
    outcome = container.photo_service.get_for_edit(requester, parsed_id)
    if outcome.kind is OutcomeKind.OK and outcome.photo:
        return photo_response(outcome.photo, rep, editable=True)
    return _failure(outcome, requester, rep)


@router.put("/photos/{photo_id}")
async def update_photo(
    photo_id: str,
    request: Request,
    body: dict[str, object] = Body(default_factory=dict),
    requester: Requester = Depends(require_requester),
    rep: Representation = Depends(representation),
) -> Response:
    """Update the caption or scope of an owned photo."""
    container: AppContainer = request.app.state.container
    parsed_id = _parse_uuid(photo_id)
    if parsed_id is None:
        return redirect_response(listing_url(requester.person), rep)
    outcome = container.photo_service.update(
        requester, parsed_id, _photo_params(body)
    )
    if outcome.kind is OutcomeKind.OK and outcome.photo:
        if rep is Representation.JSON:
            return photo_response(outcome.photo, rep)
        return redirect_response(photo_url(requester.person, outcome.photo), rep)
    return _failure(outcome, requester, rep)


@router.delete("/photos/{photo_id}")
async def destroy_photo(
    photo_id: str,
    request: Request,
    requester: Requester = Depends(require_requester),
    rep: Representation = Depends(representation),
) -> Response:
    """Delete an owned photo and retract it."""
    container: AppContainer = request.app.state.container
    parsed_id = _parse_uuid(photo_id)
    if parsed_id is None:
        return message_response(status.HTTP_404_NOT_FOUND, "Not found", rep)
    outcome = await container.photo_service.destroy(requester, parsed_id)
    if outcome.kind is OutcomeKind.OK:
        if rep is Representation.JSON:
            return no_content_response()
        return redirect_response(listing_url(requester.person), rep)
    return _failure(outcome, requester, rep)


@router.post("/photos/{photo_id}/profile")
async def set_profile_photo(
    photo_id: str,
    request: Request,
    requester: Requester = Depends(require_requester),
    rep: Representation = Depends(representation),
) -> Response:
    """Make an owned photo the requester's profile photo."""
    container: AppContainer = request.app.state.container
    parsed_id = _parse_uuid(photo_id)
    if parsed_id is None:
        return message_response(status.HTTP_404_NOT_FOUND, "Not found", rep)
    outcome = container.photo_service.set_profile_photo(requester, parsed_id)
    if outcome.kind is OutcomeKind.OK:
        return message_response(
            status.HTTP_201_CREATED, "Profile photo updated", rep
        )
    return _failure(outcome, requester, rep)


def _failure(
    outcome: PhotoOutcome, requester: Requester, rep: Representation
) -> Response:
    """Map a failed outcome to its response shape."""
    if outcome.kind is OutcomeKind.FORBIDDEN_REDIRECT:
        return redirect_response(listing_url(requester.person), rep)
    if outcome.kind is OutcomeKind.FORBIDDEN_STATUS:
        return message_response(
            _UNPROCESSABLE, "Unable to update profile photo", rep
        )
    if outcome.kind is OutcomeKind.VALIDATION_FAILURE:
        return message_response(
            _UNPROCESSABLE, "Invalid photo", rep, outcome.errors
        )
    return message_response(status.HTTP_404_NOT_FOUND, "Not found", rep)


def _photo_params(body: dict[str, object]) -> dict[str, object]:
    """Accept both ``{"photo": {...}}`` and a bare field mapping."""
    nested = body.get("photo")
    if isinstance(nested, dict):
        return nested
    return body


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None
