"""Serializers and inline HTML rendering for photo responses."""

import json
from html import escape

from fastapi import status
from fastapi.responses import HTMLResponse, JSONResponse, Response

from photo_sharing.api.negotiation import Representation
from photo_sharing.domain.people import Person
from photo_sharing.domain.photos import Photo, PhotoListing


def listing_url(person: Person) -> str:
    """Return the path of a person's photo listing."""
    return f"/people/{person.guid}/photos"


def photo_url(person: Person, photo: Photo) -> str:
    """Return the path of one photo under its author."""
    return f"/people/{person.guid}/photos/{photo.id}"


def serialize_photo(photo: Photo) -> dict[str, object]:
    """Return the public JSON shape of a photo."""
    return {
        "id": str(photo.id),
        "author_id": str(photo.author_id),
        "public": photo.public,
        "aspect_ids": sorted(str(aspect_id) for aspect_id in photo.aspect_ids),
        "caption": photo.caption,
        "pending_media": photo.pending_media,
        "created_at": photo.created_at.isoformat(),
    }


def serialize_person(person: Person) -> dict[str, object]:
    """Return the public JSON shape of a person."""
    return {"id": str(person.id), "guid": person.guid, "name": person.name}


def serialize_listing(listing: PhotoListing) -> dict[str, object]:
    """Return the listing payload with the visible count."""
    return {
        "person": serialize_person(listing.person),
        "photos": {"count": listing.count},
        "posts": [serialize_photo(photo) for photo in listing.photos],
    }


def photo_response(
    photo: Photo,
    representation: Representation,
    status_code: int = status.HTTP_200_OK,
    editable: bool = False,
) -> Response:
    """Render a single photo in the negotiated representation."""
    if representation is Representation.JSON:
        return JSONResponse(serialize_photo(photo), status_code=status_code)
    body = _render_edit_form(photo) if editable else _render_photo(photo)
    return HTMLResponse(_page("Photo", body), status_code=status_code)


def listing_response(
    listing: PhotoListing, representation: Representation
) -> Response:
    """Render a person's photo listing."""
    payload = serialize_listing(listing)
    if representation is Representation.JSON:
        return JSONResponse(payload)
    summary = json.dumps({"photos": payload["photos"]}, separators=(",", ":"))
    items = "\n".join(
        f'      <li><a href="{photo_url(listing.person, photo)}">'
        f"{escape(photo.caption or 'Untitled photo')}</a></li>"
        for photo in listing.photos
    )
    name = escape(listing.person.name or listing.person.guid)
    body = (
        f"    <h1>Photos of {name}</h1>\n"
        f'    <p class="photo-count">{listing.count} photos</p>\n'
        f"    <ul>\n{items}\n    </ul>\n"
        f"    <script>window.gon = {summary};</script>"
    )
    return HTMLResponse(
        _page(f"Photos of {listing.person.name or listing.person.guid}", body)
    )


def redirect_response(url: str, representation: Representation) -> Response:
    """Redirect in either representation; the Location header is authoritative."""
    if representation is Representation.JSON:
        return JSONResponse(
            {"redirect": url},
            status_code=status.HTTP_302_FOUND,
            headers={"Location": url},
        )
    return HTMLResponse(
        _page("Redirecting", f'    <p><a href="{escape(url)}">Continue</a></p>'),
        status_code=status.HTTP_302_FOUND,
        headers={"Location": url},
    )


def message_response(
    status_code: int,
    error: str,
    representation: Representation,
    errors: dict[str, str] | None = None,
) -> Response:
    """Render an error or status message."""
    if representation is Representation.JSON:
        payload: dict[str, object] = {"error": error}
        if errors:
            payload["errors"] = errors
        return JSONResponse(payload, status_code=status_code)
    details = "".join(
        f"      <li>{escape(field)}: {escape(message)}</li>\n"
        for field, message in (errors or {}).items()
    )
    body = f"    <p>{escape(error)}</p>\n"
    if details:
        body += f"    <ul>\n{details}    </ul>"
    return HTMLResponse(_page(error, body), status_code=status_code)


def no_content_response() -> Response:
    """Return an empty 204 response."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _render_photo(photo: Photo) -> str:
    caption = escape(photo.caption or "")
    return (
        f'    <figure data-photo-id="{photo.id}">\n'
        f'      <img src="{escape(photo.pending_media)}" alt="{caption}" />\n'
        f"      <figcaption>{caption}</figcaption>\n"
        f"    </figure>"
    )


def _render_edit_form(photo: Photo) -> str:
    return (
        f'    <form method="post" action="/photos/{photo.id}">\n'
        '      <input type="hidden" name="_method" value="put" />\n'
        '      <textarea name="caption">'
        f"{escape(photo.caption or '')}</textarea>\n"
        '      <button type="submit">Save</button>\n'
        "    </form>"
    )


def _page(title: str, body: str) -> str:
    return (
        "<!doctype html>\n"
        '<html lang="en">\n'
        "  <head>\n"
        '    <meta charset="utf-8" />\n'
        f"    <title>{escape(title)}</title>\n"
        "  </head>\n"
        "  <body>\n"
        f"{body}\n"
        "  </body>\n"
        "</html>\n"
    )
