"""Inbound gateway events, outbound media and transcript records."""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field


class Attachment(BaseModel):
    """Media descriptor forwarded by the messaging gateway."""
    kind: Literal["image", "document"]
    handle: str
    mime_type: str
    filename: Optional[str] = None
    caption: Optional[str] = None


class InboundMessage(BaseModel):
    """One inbound WhatsApp message addressed to a hotel's number."""
    channel_id: str
    contact_id: str
    text: str = ""
    attachment: Optional[Attachment] = None
    contact_name: Optional[str] = None

    @property
    def conversation_id(self) -> str:
        return f"{self.channel_id}:{self.contact_id}"


class MediaItem(BaseModel):
    """Outbound image to send before the text reply."""
    url: str
    caption: Optional[str] = None


class TranscriptEntry(BaseModel):
    """Append-only record of an outbound reply for the live-chat view."""
    channel_id: str
    contact_id: str
    text: Optional[str] = None
    media_url: Optional[str] = None
    delivered: bool
    message_ref: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
