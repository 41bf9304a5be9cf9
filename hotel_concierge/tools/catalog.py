"""
In-memory hotel catalog.

In production the catalog is the platform's hotel/room tables, edited by
the hotel's staff screens. The engine only ever reads it.
"""

import logging
from typing import Iterable, Optional

from hotel_concierge.schemas.catalog_schema import Hotel, RoomPhoto, RoomType

logger = logging.getLogger(__name__)


class InMemoryCatalog:
    """CatalogReader backed by plain dictionaries."""

    def __init__(
        self,
        hotels: Iterable[Hotel] = (),
        rooms: Iterable[RoomType] = (),
        photos: Iterable[RoomPhoto] = (),
    ) -> None:
        self._hotels: list[Hotel] = list(hotels)
        self._rooms: list[RoomType] = list(rooms)
        self._photos: list[RoomPhoto] = list(photos)

    def add_hotel(self, hotel: Hotel) -> None:
        self._hotels.append(hotel)

    def add_room(self, room: RoomType) -> None:
        self._rooms.append(room)

    def add_photo(self, photo: RoomPhoto) -> None:
        self._photos.append(photo)

    def set_room_available(self, room_type_id: str, available: bool) -> None:
        for index, room in enumerate(self._rooms):
            if room.id == room_type_id:
                self._rooms[index] = room.model_copy(update={"is_available": available})
                return
        raise KeyError(room_type_id)

    async def get_active_hotel(self, channel_id: str) -> Optional[Hotel]:
        for hotel in self._hotels:
            if hotel.channel_id == channel_id and hotel.is_active:
                return hotel
        logger.debug("No active hotel for channel %s", channel_id)
        return None

    async def list_available_rooms(self, hotel_id: str) -> list[RoomType]:
        rooms = [r for r in self._rooms if r.hotel_id == hotel_id and r.is_available]
        return sorted(rooms, key=lambda r: (r.display_order, r.name))

    async def get_room_photos(self, room_type_id: str) -> list[RoomPhoto]:
        photos = [p for p in self._photos if p.room_type_id == room_type_id]
        return sorted(photos, key=lambda p: p.display_order)
