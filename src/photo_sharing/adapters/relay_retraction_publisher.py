"""Federation relay client for retraction notices."""

from dataclasses import dataclass

import httpx

from photo_sharing.domain.photos import Retraction
from photo_sharing.services.photos import RetractionPublisher


@dataclass
class HttpxRetractionPublisher(RetractionPublisher):
    """Posts retractions to the federation relay, which handles delivery."""

    relay_url: str
    http_client: httpx.AsyncClient
    token: str | None = None

    @classmethod
    def create(
        cls, relay_url: str, token: str | None = None
    ) -> "HttpxRetractionPublisher":
        """Create a publisher with a managed httpx session."""
        return cls(relay_url=relay_url, http_client=httpx.AsyncClient(), token=token)

    async def publish(self, retraction: Retraction) -> None:
        """Send one retraction and fail loudly if the relay refuses it."""
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        payload: dict[str, object] = {
            "type": "retraction",
            "target_type": retraction.target_type,
            "target_id": str(retraction.photo_id),
            "author": retraction.author_guid,
        }
        response = await self.http_client.post(
            f"{self.relay_url.rstrip('/')}/retractions",
            json=payload,
            headers=headers,
            timeout=10,
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
