"""Domain models for people and requesters."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class Person:
    """A person who can author photos."""

    id: UUID
    guid: str
    name: str | None = None


@dataclass(frozen=True)
class Requester:
    """Authenticated identity behind a request."""

    person: Person
    aspect_ids: frozenset[UUID] = field(default_factory=frozenset)
