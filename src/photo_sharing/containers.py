"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from photo_sharing.adapters.relay_retraction_publisher import HttpxRetractionPublisher
from photo_sharing.adapters.supabase_audit_repository import SupabaseAuditRepository
from photo_sharing.adapters.supabase_identity_provider import SupabaseIdentityProvider
from photo_sharing.adapters.supabase_person_repository import SupabasePersonRepository
from photo_sharing.adapters.supabase_photo_repository import SupabasePhotoRepository
from photo_sharing.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from photo_sharing.config import Settings
from photo_sharing.services.audit import AuditService
from photo_sharing.services.people import IdentityProvider, PeopleService
from photo_sharing.services.photos import PhotoService
from photo_sharing.services.visibility import VisibilityService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_provider: IdentityProvider
    people_service: PeopleService
    visibility_service: VisibilityService
    photo_service: PhotoService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    person_repository = SupabasePersonRepository(supabase_client)
    photo_repository = SupabasePhotoRepository(supabase_client)
    people_service = PeopleService(person_repository)
    retraction_publisher = HttpxRetractionPublisher.create(
        relay_url=resolved_settings.federation_relay_url,
        token=resolved_settings.federation_relay_token,
    )
    photo_service = PhotoService(
        photo_repository=photo_repository,
        profile_repository=SupabaseProfileRepository(supabase_client),
        retraction_publisher=retraction_publisher,
        audit_service=AuditService(SupabaseAuditRepository(supabase_client)),
    )

    async def close_resources() -> None:
        await retraction_publisher.close()

    return AppContainer(
        settings=resolved_settings,
        identity_provider=SupabaseIdentityProvider(supabase_client, person_repository),
        people_service=people_service,
        visibility_service=VisibilityService(photo_repository, people_service),
        photo_service=photo_service,
        close_resources=close_resources,
    )
