"""Resolve bearer tokens through Supabase auth."""

import logging
from dataclasses import dataclass

from supabase import Client

from photo_sharing.adapters.supabase_person_repository import SupabasePersonRepository
from photo_sharing.domain.people import Requester
from photo_sharing.services.people import IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Maps a Supabase access token to the person who owns it."""

    client: Client
    person_repository: SupabasePersonRepository

    def resolve(self, token: str) -> Requester | None:
        """Return the requester for an access token, or None if rejected."""
        try:
            response = self.client.auth.get_user(token)
        except Exception:
            logger.warning("Rejected access token", exc_info=True)
            return None
        if response is None or response.user is None:
            return None
        person = self.person_repository.get_by_user_id(response.user.id)
        if person is None:
            return None
        return Requester(
            person=person,
            aspect_ids=self.person_repository.list_aspect_ids(person.id),
        )
