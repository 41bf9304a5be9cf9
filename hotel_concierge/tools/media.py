"""
In-memory media relay.

Records every outbound message instead of sending it, and serves inbound
attachments from a dict of handle -> (bytes, MIME type). Used by the tests and the
console demo.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from hotel_concierge.errors import DeliveryError, MediaRelayError

logger = logging.getLogger(__name__)


@dataclass
class SentMessage:
    contact_id: str
    text: Optional[str] = None
    image_url: Optional[str] = None
    caption: Optional[str] = None


class InMemoryMediaRelay:
    """MediaRelay that keeps everything in lists and dicts."""

    def __init__(self) -> None:
        self.sent: list[SentMessage] = []
        self.inbound_media: dict[str, tuple[bytes, str]] = {}
        self.documents: dict[str, bytes] = {}
        self.fail_sends = False
        self.fail_storage = False

    async def fetch_inbound_media(self, handle: str) -> tuple[bytes, str]:
        try:
            return self.inbound_media[handle]
        except KeyError:
            raise MediaRelayError(f"Unknown media handle {handle}") from None

    async def store_document(self, booking_id: str, content: bytes, mime_type: str) -> str:
        if self.fail_storage:
            raise MediaRelayError("document storage unavailable")
        ref = f"memory://{booking_id}/{uuid.uuid4().hex[:12]}"
        self.documents[ref] = content
        return ref

    async def send_text(self, contact_id: str, text: str) -> Optional[str]:
        if self.fail_sends:
            raise DeliveryError(f"text to {contact_id} not delivered")
        self.sent.append(SentMessage(contact_id=contact_id, text=text))
        return f"wamid.{uuid.uuid4().hex[:16]}"

    async def send_image(
        self, contact_id: str, url: str, caption: Optional[str] = None
    ) -> Optional[str]:
        if self.fail_sends:
            raise DeliveryError(f"image to {contact_id} not delivered")
        self.sent.append(SentMessage(contact_id=contact_id, image_url=url, caption=caption))
        return f"wamid.{uuid.uuid4().hex[:16]}"

    def texts_to(self, contact_id: str) -> list[str]:
        return [m.text for m in self.sent if m.contact_id == contact_id and m.text is not None]

    def images_to(self, contact_id: str) -> list[SentMessage]:
        return [m for m in self.sent if m.contact_id == contact_id and m.image_url is not None]
