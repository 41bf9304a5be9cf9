"""
WhatsApp Cloud API media relay.

Sends replies through the Graph API ``/{phone-number-id}/messages``
endpoint, downloads inbound attachments in two hops (media id -> signed
URL -> bytes), and keeps ID documents on local disk under
``DOCUMENT_STORAGE_DIR/<booking id>/``.

Usage:
    async with WhatsAppCloudRelay(settings.gateway) as relay:
        await relay.send_text("+919800000001", "Hello!")
"""

import asyncio
import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Any, Optional

import httpx

from hotel_concierge.config import GatewayConfig, settings
from hotel_concierge.errors import DeliveryError, MediaRelayError

logger = logging.getLogger(__name__)


def _graph_error(response: httpx.Response) -> str:
    """Pull the Graph API error message out of a failed response."""
    try:
        error = response.json().get("error", {})
    except ValueError:
        return f"HTTP {response.status_code}"
    return f"HTTP {response.status_code}: {error.get('message', 'unknown error')} (code {error.get('code')})"


class WhatsAppCloudRelay:
    """MediaRelay over the WhatsApp Cloud (Graph) API."""

    def __init__(
        self,
        config: GatewayConfig = settings.gateway,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout_seconds)
        self._storage_dir = Path(config.document_storage_dir)

    async def __aenter__(self) -> "WhatsAppCloudRelay":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def _api_root(self) -> str:
        return f"{self._config.api_base_url.rstrip('/')}/{self._config.api_version}"

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._config.access_token}"}

    # ------------------------------------------------------------------ #
    # Outbound
    # ------------------------------------------------------------------ #

    async def _post_message(self, contact_id: str, payload: dict[str, Any]) -> Optional[str]:
        url = f"{self._api_root}/{self._config.phone_number_id}/messages"
        body = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": contact_id.lstrip("+"),
            **payload,
        }
        try:
            response = await self._client.post(url, json=body, headers=self._headers)
        except httpx.HTTPError as exc:
            raise DeliveryError(f"WhatsApp send failed: {exc}") from exc
        if response.is_error:
            raise DeliveryError(f"WhatsApp send rejected: {_graph_error(response)}")

        try:
            messages = response.json().get("messages") or [{}]
        except ValueError:
            # Accepted, but the body is not Graph JSON (e.g. a proxy page).
            logger.warning("WhatsApp send to %s returned a non-JSON body", contact_id)
            return None
        return messages[0].get("id")

    async def send_text(self, contact_id: str, text: str) -> Optional[str]:
        return await self._post_message(
            contact_id, {"type": "text", "text": {"preview_url": False, "body": text}}
        )

    async def send_image(
        self, contact_id: str, url: str, caption: Optional[str] = None
    ) -> Optional[str]:
        image: dict[str, str] = {"link": url}
        if caption:
            image["caption"] = caption
        return await self._post_message(contact_id, {"type": "image", "image": image})

    # ------------------------------------------------------------------ #
    # Inbound media and document storage
    # ------------------------------------------------------------------ #

    async def fetch_inbound_media(self, handle: str) -> tuple[bytes, str]:
        """Resolve a media id to its signed URL, then download the bytes and MIME type."""
        try:
            meta = await self._client.get(f"{self._api_root}/{handle}", headers=self._headers)
            meta.raise_for_status()
            info = meta.json()
            media_url = info.get("url")
            if not media_url:
                raise MediaRelayError(f"No download URL for media {handle}")
            download = await self._client.get(media_url, headers=self._headers)
            download.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise MediaRelayError(
                f"Media {handle} fetch failed: {_graph_error(exc.response)}"
            ) from exc
        except httpx.HTTPError as exc:
            raise MediaRelayError(f"Media {handle} fetch failed: {exc}") from exc
        except ValueError as exc:
            raise MediaRelayError(f"Media {handle} metadata is not JSON") from exc

        mime_type = info.get("mime_type") or download.headers.get(
            "content-type", "application/octet-stream"
        )
        logger.debug("Fetched media %s (%d bytes, %s)", handle, len(download.content), mime_type)
        return download.content, mime_type

    async def store_document(self, booking_id: str, content: bytes, mime_type: str) -> str:
        extension = mimetypes.guess_extension(mime_type.split(";")[0].strip()) or ".bin"
        path = self._storage_dir / booking_id / f"{uuid.uuid4().hex}{extension}"
        try:
            await asyncio.to_thread(self._write_file, path, content)
        except OSError as exc:
            raise MediaRelayError(f"Could not store document for {booking_id}: {exc}") from exc
        logger.info("Stored ID document for %s at %s", booking_id, path)
        return str(path)

    @staticmethod
    def _write_file(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
