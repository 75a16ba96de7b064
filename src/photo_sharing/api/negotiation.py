"""Choose between JSON and rendered HTML for a request."""

from enum import StrEnum


class Representation(StrEnum):
    """Response formats the API can produce."""

    JSON = "json"
    HTML = "html"


_FORMAT_OVERRIDES = {
    "json": Representation.JSON,
    "html": Representation.HTML,
    "mobile": Representation.HTML,
    "js": Representation.HTML,
}
_HTML_RANGES = {"text/html", "text/*", "*/*"}
_JSON_TYPE = "application/json"


def negotiate(
    accept: str | None, format_override: str | None = None
) -> Representation:
    """Pick JSON only when the client explicitly prefers it; HTML otherwise."""
    if format_override:
        override = _FORMAT_OVERRIDES.get(format_override.lower())
        if override is not None:
            return override
    json_rank: tuple[float, int] | None = None
    html_rank: tuple[float, int] | None = None
    for position, (media_type, quality) in enumerate(parse_accept(accept)):
        if quality <= 0:
            continue
        # Higher quality wins; on a tie the earlier entry does.
        rank = (quality, -position)
        if media_type == _JSON_TYPE and (json_rank is None or rank > json_rank):
            json_rank = rank
        elif media_type in _HTML_RANGES and (html_rank is None or rank > html_rank):
            html_rank = rank
    if json_rank is not None and (html_rank is None or json_rank > html_rank):
        return Representation.JSON
    return Representation.HTML


def parse_accept(accept: str | None) -> list[tuple[str, float]]:
    """Split an Accept header into (media type, quality) pairs in header order."""
    if not accept:
        return []
    ranges: list[tuple[str, float]] = []
    for chunk in accept.split(","):
        media_type, *params = (part.strip() for part in chunk.split(";"))
        if not media_type:
            continue
        quality = 1.0
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        ranges.append((media_type.lower(), quality))
    return ranges
