"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from photo_sharing.domain.photos import Photo, PhotoDraft, PhotoQuery
from photo_sharing.services.visibility import PhotoRepository

_COLUMNS = "id, author_id, public, aspect_ids, text, pending_media, created_at"


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo persistence."""

    client: Client

    def create_photo(self, draft: PhotoDraft) -> Photo:
        """Insert a photo row and return it."""
        response = (
            self.client.table("photos")
            .insert(
                {
                    "author_id": str(draft.author_id),
                    "public": draft.scope.public,
                    "aspect_ids": _aspect_list(draft.scope.aspect_ids),
                    "text": draft.caption,
                    "pending_media": draft.pending_media,
                    "created_at": draft.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo")
        return _row_to_photo(response.data[0])

    def get_photo(self, photo_id: UUID) -> Photo | None:
        """Return a photo by id, if present."""
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq("id", str(photo_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_photo(response.data[0])

    def update_photo(self, photo_id: UUID, changes: dict[str, object]) -> Photo | None:
        """Update caption and scope columns; last writer wins."""
        payload: dict[str, object] = {}
        if "caption" in changes:
            payload["text"] = changes["caption"]
        if "public" in changes:
            payload["public"] = changes["public"]
        if "aspect_ids" in changes:
            payload["aspect_ids"] = _aspect_list(changes["aspect_ids"])
        response = (
            self.client.table("photos").update(payload).eq("id", str(photo_id)).execute()
        )
        if not response.data:
            return None
        return _row_to_photo(response.data[0])

    def delete_photo(self, photo_id: UUID) -> bool:
        """Delete a photo row; only the request that removed it gets True."""
        response = self.client.table("photos").delete().eq("id", str(photo_id)).execute()
        return bool(response.data)

    def list_photos(self, query: PhotoQuery) -> list[Photo]:
        """Return the newest matching photos."""
        request = _filtered(self.client.table("photos").select(_COLUMNS), query)
        if query.max_time is not None:
            request = request.lt("created_at", query.max_time.isoformat())
        request = request.order("created_at", desc=True)
        if query.limit is not None:
            request = request.limit(query.limit)
        response = request.execute()
        return [_row_to_photo(row) for row in response.data or []]

    def count_photos(self, query: PhotoQuery) -> int:
        """Return an exact count of matching photos."""
        request = _filtered(
            self.client.table("photos").select("id", count="exact"), query
        )
        if query.max_time is not None:
            request = request.lt("created_at", query.max_time.isoformat())
        response = request.execute()
        if response.count is not None:
            return response.count
        return len(response.data or [])


def _filtered(request, query: PhotoQuery):  # type: ignore[no-untyped-def]
    request = request.eq("author_id", str(query.author_id))
    if query.aspect_ids is None:
        return request
    if not query.aspect_ids:
        return request.eq("public", True)
    aspects = ",".join(sorted(str(aspect_id) for aspect_id in query.aspect_ids))
    return request.or_(f"public.is.true,aspect_ids.ov.{{{aspects}}}")


def _aspect_list(aspect_ids: object) -> list[str]:
    return sorted(str(aspect_id) for aspect_id in aspect_ids)  # type: ignore[attr-defined]


def _row_to_photo(row: dict[str, object]) -> Photo:
    return Photo(
        id=UUID(str(row["id"])),
        author_id=UUID(str(row["author_id"])),
        public=bool(row.get("public")),
        aspect_ids=frozenset(UUID(str(value)) for value in row.get("aspect_ids") or []),
        caption=row.get("text"),  # type: ignore[arg-type]
        pending_media=str(row.get("pending_media") or ""),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
