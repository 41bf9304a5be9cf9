"""Hotel, room type and photo records read from the tenant catalog."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Hotel(BaseModel):
    """Tenant hotel profile. At most one is active per WhatsApp number."""
    id: str
    channel_id: str
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    google_maps_link: Optional[str] = None
    reception_timing: Optional[str] = None
    languages: list[str] = Field(default_factory=list)
    cancellation_policy: Optional[str] = None
    is_active: bool = True


class RoomType(BaseModel):
    """Bookable room category. ``base_price`` of None means price on request."""
    id: str
    hotel_id: str
    name: str
    description: Optional[str] = None
    max_adults: int = 2
    max_children: int = 0
    base_price: Optional[Decimal] = None
    amenities: list[str] = Field(default_factory=list)
    is_ac: bool = False
    is_available: bool = True
    display_order: int = 0


class RoomPhoto(BaseModel):
    id: str
    room_type_id: str
    photo_url: str
    display_order: int = 0


class RoomOption(BaseModel):
    """A room type frozen at the moment a menu listed it.

    Numeric replies resolve against these copies, so a later catalog
    edit never changes what "2" meant in an earlier message.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: Optional[str] = None
    max_adults: int = 2
    max_children: int = 0
    base_price: Optional[Decimal] = None
    amenities: tuple[str, ...] = ()
    is_ac: bool = False

    @classmethod
    def from_room(cls, room: RoomType) -> "RoomOption":
        return cls(
            id=room.id,
            name=room.name,
            description=room.description,
            max_adults=room.max_adults,
            max_children=room.max_children,
            base_price=room.base_price,
            amenities=tuple(room.amenities),
            is_ac=room.is_ac,
        )
