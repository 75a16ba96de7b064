"""Supabase repository for photo audit events."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from photo_sharing.services.audit import AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Appends audit rows to the ``audit_events`` table."""

    client: Client

    def create_event(  # noqa: PLR0913
        self,
        actor_id: UUID,
        entity_type: str,
        entity_id: UUID,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        """Insert one audit row."""
        self.client.table("audit_events").insert(
            {
                "actor_id": str(actor_id),
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "event_type": event_type,
                "before_json": before,
                "after_json": after,
            }
        ).execute()
