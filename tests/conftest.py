"""Shared test fixtures."""

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from photo_sharing.config import Settings
from photo_sharing.containers import AppContainer
from photo_sharing.domain.people import Person, Requester
from photo_sharing.domain.photos import (
    Photo,
    PhotoDraft,
    PhotoQuery,
    PhotoScope,
    Retraction,
)
from photo_sharing.services.audit import AuditRepository, AuditService
from photo_sharing.services.people import (
    IdentityProvider,
    PeopleService,
    PersonRepository,
)
from photo_sharing.services.photos import (
    PhotoService,
    ProfileRepository,
    RetractionPublisher,
)
from photo_sharing.services.visibility import PhotoRepository, VisibilityService

JWT_LIKE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJlLWZvci10ZXN0cw"
)


@dataclass
class InMemoryPersonRepository(PersonRepository):
    """In-memory people, aspects and memberships for tests."""

    people: dict[str, Person] = field(default_factory=dict)
    aspect_owners: dict[UUID, UUID] = field(default_factory=dict)
    memberships: set[tuple[UUID, UUID]] = field(default_factory=set)

    def add_person(self, guid: str, name: str | None = None) -> Person:
        person = Person(id=uuid4(), guid=guid, name=name)
        self.people[guid] = person
        return person

    def add_aspect(self, owner: Person) -> UUID:
        aspect_id = uuid4()
        self.aspect_owners[aspect_id] = owner.id
        return aspect_id

    def add_member(self, aspect_id: UUID, member: Person) -> None:
        self.memberships.add((aspect_id, member.id))

    def requester_for(self, person: Person) -> Requester:
        return Requester(person=person, aspect_ids=self.list_aspect_ids(person.id))

    def get_by_guid(self, guid: str) -> Person | None:
        return self.people.get(guid)

    def list_aspect_ids(self, person_id: UUID) -> frozenset[UUID]:
        return frozenset(
            aspect_id
            for aspect_id, owner_id in self.aspect_owners.items()
            if owner_id == person_id
        )

    def aspect_ids_with_member(
        self, owner_id: UUID, member_id: UUID
    ) -> frozenset[UUID]:
        return frozenset(
            aspect_id
            for aspect_id in self.list_aspect_ids(owner_id)
            if (aspect_id, member_id) in self.memberships
        )


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo store for tests."""

    photos: dict[UUID, Photo] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def create_photo(self, draft: PhotoDraft) -> Photo:
        photo = Photo(
            id=uuid4(),
            author_id=draft.author_id,
            public=draft.scope.public,
            aspect_ids=draft.scope.aspect_ids,
            caption=draft.caption,
            pending_media=draft.pending_media,
            created_at=draft.created_at,
        )
        with self._lock:
            self.photos[photo.id] = photo
        return photo

    def get_photo(self, photo_id: UUID) -> Photo | None:
        return self.photos.get(photo_id)

    def update_photo(self, photo_id: UUID, changes: dict[str, object]) -> Photo | None:
        with self._lock:
            current = self.photos.get(photo_id)
            if current is None:
                return None
            updated = replace(current, **changes)
            self.photos[photo_id] = updated
            return updated

    def delete_photo(self, photo_id: UUID) -> bool:
        with self._lock:
            return self.photos.pop(photo_id, None) is not None

    def list_photos(self, query: PhotoQuery) -> list[Photo]:
        matching = sorted(
            (photo for photo in self.photos.values() if query.matches(photo)),
            key=lambda photo: photo.created_at,
            reverse=True,
        )
        return matching[: query.limit] if query.limit is not None else matching

    def count_photos(self, query: PhotoQuery) -> int:
        return sum(1 for photo in self.photos.values() if query.matches(photo))


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile photo designations for tests."""

    designations: dict[UUID, UUID] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def get_profile_photo_id(self, person_id: UUID) -> UUID | None:
        return self.designations.get(person_id)

    def set_profile_photo(self, person_id: UUID, photo_id: UUID) -> None:
        with self._lock:
            self.designations[person_id] = photo_id

    def clear_profile_photo(self, person_id: UUID, photo_id: UUID) -> None:
        with self._lock:
            if self.designations.get(person_id) == photo_id:
                del self.designations[person_id]


@dataclass
class InMemoryAuditRepository(AuditRepository):
    """In-memory audit repository for tests."""

    events: list[dict[str, object]] = field(default_factory=list)

    def create_event(  # noqa: PLR0913
        self,
        actor_id: UUID,
        entity_type: str,
        entity_id: UUID,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        self.events.append(
            {
                "actor_id": actor_id,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "event_type": event_type,
                "before": before,
                "after": after,
            }
        )

    def event_types(self) -> list[str]:
        return [str(event["event_type"]) for event in self.events]


@dataclass
class FakeRetractionPublisher(RetractionPublisher):
    """Records retractions instead of sending them."""

    retractions: list[Retraction] = field(default_factory=list)
    fail: bool = False

    async def publish(self, retraction: Retraction) -> None:
        if self.fail:
            raise RuntimeError("relay unavailable")
        self.retractions.append(retraction)


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Maps static tokens to requesters."""

    tokens: dict[str, Requester] = field(default_factory=dict)

    def resolve(self, token: str) -> Requester | None:
        return self.tokens.get(token)


@dataclass
class World:
    """Alice, Bob and Eve with one aspect each and a photo apiece.

    Alice and Bob share with each other; Eve shares with nobody. Alice's photo
    is limited to her aspect, Bob's is public.
    """

    alice: Requester
    bob: Requester
    eve: Requester
    alices_photo: Photo
    bobs_photo: Photo

    def headers(self, requester: Requester, accept: str | None = None) -> dict:
        headers = {"Authorization": f"Bearer {requester.person.guid}-token"}
        if accept:
            headers["Accept"] = accept
        return headers


def post_photo(  # noqa: PLR0913
    repository: InMemoryPhotoRepository,
    author: Requester,
    *,
    public: bool = False,
    aspect_ids: frozenset[UUID] | None = None,
    caption: str | None = None,
    created_at: datetime | None = None,
) -> Photo:
    """Store a photo directly, bypassing the service."""
    return repository.create_photo(
        PhotoDraft(
            author_id=author.person.id,
            scope=PhotoScope(
                public=public,
                aspect_ids=author.aspect_ids if aspect_ids is None else aspect_ids,
            ),
            caption=caption,
            pending_media="uploads/button.png",
            created_at=created_at or datetime.now(tz=UTC) - timedelta(minutes=1),
        )
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=JWT_LIKE_KEY,
        federation_relay_url="https://relay.example.test",
    )


@pytest.fixture
def person_repository() -> InMemoryPersonRepository:
    return InMemoryPersonRepository()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def audit_repository() -> InMemoryAuditRepository:
    return InMemoryAuditRepository()


@pytest.fixture
def retraction_publisher() -> FakeRetractionPublisher:
    return FakeRetractionPublisher()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def people_service(person_repository: InMemoryPersonRepository) -> PeopleService:
    return PeopleService(person_repository)


@pytest.fixture
def visibility_service(
    photo_repository: InMemoryPhotoRepository, people_service: PeopleService
) -> VisibilityService:
    return VisibilityService(photo_repository, people_service)


@pytest.fixture
def photo_service(
    photo_repository: InMemoryPhotoRepository,
    profile_repository: InMemoryProfileRepository,
    retraction_publisher: FakeRetractionPublisher,
    audit_repository: InMemoryAuditRepository,
) -> PhotoService:
    return PhotoService(
        photo_repository=photo_repository,
        profile_repository=profile_repository,
        retraction_publisher=retraction_publisher,
        audit_service=AuditService(audit_repository),
    )


@pytest.fixture
def world(
    person_repository: InMemoryPersonRepository,
    photo_repository: InMemoryPhotoRepository,
    identity_provider: FakeIdentityProvider,
) -> World:
    alice_person = person_repository.add_person("alice", name="Alice Smith")
    bob_person = person_repository.add_person("bob", name="Bob Grimm")
    eve_person = person_repository.add_person("eve", name="Eve Doe")
    alice_aspect = person_repository.add_aspect(alice_person)
    bob_aspect = person_repository.add_aspect(bob_person)
    person_repository.add_aspect(eve_person)
    person_repository.add_member(alice_aspect, bob_person)
    person_repository.add_member(bob_aspect, alice_person)

    alice = person_repository.requester_for(alice_person)
    bob = person_repository.requester_for(bob_person)
    eve = person_repository.requester_for(eve_person)
    for requester in (alice, bob, eve):
        identity_provider.tokens[f"{requester.person.guid}-token"] = requester

    return World(
        alice=alice,
        bob=bob,
        eve=eve,
        alices_photo=post_photo(photo_repository, alice, public=False),
        bobs_photo=post_photo(photo_repository, bob, public=True),
    )


@pytest.fixture
def container(
    settings: Settings,
    identity_provider: FakeIdentityProvider,
    people_service: PeopleService,
    visibility_service: VisibilityService,
    photo_service: PhotoService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        identity_provider=identity_provider,
        people_service=people_service,
        visibility_service=visibility_service,
        photo_service=photo_service,
        close_resources=close_resources,
    )
