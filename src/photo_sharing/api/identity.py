"""Request dependencies for identity and representation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Query, Request, status

from photo_sharing.api.negotiation import Representation, negotiate
from photo_sharing.domain.people import Requester  # noqa: TC001

if TYPE_CHECKING:
    from photo_sharing.containers import AppContainer


def current_requester(
    request: Request, authorization: str | None = Header(default=None)
) -> Requester | None:
    """Resolve the bearer token to a requester; anonymous when absent or unknown."""
    token = _bearer_token(authorization)
    if token is None:
        return None
    container: AppContainer = request.app.state.container
    return container.identity_provider.resolve(token)


def require_requester(
    requester: Requester | None = Depends(current_requester),
) -> Requester:
    """Reject anonymous requests to owner-only routes."""
    if requester is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return requester


def representation(
    request: Request, format: str | None = Query(default=None)  # noqa: A002
) -> Representation:
    """Negotiate the response format from ``?format=`` and the Accept header."""
    return negotiate(request.headers.get("accept"), format)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
