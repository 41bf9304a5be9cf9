"""
Offline console demo: chat with the booking assistant in the terminal.

Drives the real DialogueEngine against the in-memory catalog, stores and
media relay. No WhatsApp account, no database, no network calls. Replies
and photo sends are printed as they would arrive on the guest's phone.

Usage:
    python console_demo.py
    python console_demo.py --scenario booking
    python console_demo.py --scenario status
"""

import argparse
import asyncio
from datetime import date, timedelta
from decimal import Decimal

from hotel_concierge.config import settings
from hotel_concierge.engine import DialogueEngine
from hotel_concierge.schemas.booking_schema import Booking, BookingStatus
from hotel_concierge.schemas.catalog_schema import Hotel, RoomPhoto, RoomType
from hotel_concierge.schemas.message_schema import InboundMessage
from hotel_concierge.tools.booking import InMemoryBookingStore
from hotel_concierge.tools.catalog import InMemoryCatalog
from hotel_concierge.tools.media import InMemoryMediaRelay
from hotel_concierge.tools.sessions import InMemorySessionStore
from hotel_concierge.tools.transcript import InMemoryTranscriptSink

BLUE = "\033[94m"
GREEN = "\033[92m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

CHANNEL_ID = "demo-channel"
GUEST = "+919800000001"
DEMO_BOOKING_ID = "SVR-7K3M9QPA"


def build_catalog() -> InMemoryCatalog:
    hotel = Hotel(
        id="hotel-demo",
        channel_id=CHANNEL_ID,
        name="Sea View Resort",
        description="Beachfront stay, 5 minutes from Calangute beach.",
        address="12 Beach Road, Calangute, Goa 403516",
        phone="+91 832 555 0100",
        email="stay@seaviewresort.example",
        google_maps_link="https://maps.google.com/?q=Sea+View+Resort+Goa",
        reception_timing="24 hours",
        languages=["English", "Hindi", "Konkani"],
        cancellation_policy="Free cancellation up to 48 hours before check-in.",
    )
    rooms = [
        RoomType(
            id="room-deluxe", hotel_id=hotel.id, name="Deluxe Room",
            description="Queen bed with a garden view.", max_adults=2, max_children=1,
            base_price=Decimal("2000"), amenities=["Wi-Fi", "TV", "Breakfast"],
            is_ac=True, display_order=1,
        ),
        RoomType(
            id="room-suite", hotel_id=hotel.id, name="Sea View Suite",
            description="King bed, balcony facing the sea.", max_adults=3, max_children=2,
            base_price=Decimal("4500"), amenities=["Wi-Fi", "Mini bar", "Bathtub"],
            is_ac=True, display_order=2,
        ),
        RoomType(
            id="room-dorm", hotel_id=hotel.id, name="Backpacker Dorm",
            max_adults=1, display_order=3,
        ),
    ]
    photos = [
        RoomPhoto(id="p1", room_type_id="room-deluxe",
                  photo_url="https://cdn.example/deluxe-1.jpg", display_order=1),
        RoomPhoto(id="p2", room_type_id="room-deluxe",
                  photo_url="https://cdn.example/deluxe-2.jpg", display_order=2),
        RoomPhoto(id="p3", room_type_id="room-suite",
                  photo_url="https://cdn.example/suite-1.jpg", display_order=1),
    ]
    return InMemoryCatalog(hotels=[hotel], rooms=rooms, photos=photos)


def build_bookings(today: date) -> InMemoryBookingStore:
    existing = Booking(
        booking_id=DEMO_BOOKING_ID,
        hotel_id="hotel-demo",
        room_type_id="room-suite",
        room_name="Sea View Suite",
        guest_name="Asha Rao",
        guest_phone=GUEST,
        check_in_date=today + timedelta(days=10),
        check_out_date=today + timedelta(days=13),
        adults=2,
        total_price=Decimal("13500"),
        status=BookingStatus.CONFIRMED,
    )
    return InMemoryBookingStore([existing])


class ConsoleSession:
    """Plays one guest chatting with the demo hotel."""

    def __init__(self) -> None:
        today = date.today()
        self.today = today
        self.relay = InMemoryMediaRelay()
        self.engine = DialogueEngine(
            catalog=build_catalog(),
            sessions=InMemorySessionStore(),
            bookings=build_bookings(today),
            relay=self.relay,
            transcript=InMemoryTranscriptSink(),
            config=settings.bot,
        )
        self._printed = 0
        self.states: list[str] = []

    def scenarios(self) -> dict[str, list[str]]:
        check_in = (self.today + timedelta(days=30)).strftime("%d/%m/%Y")
        check_out = (self.today + timedelta(days=32)).strftime("%d %b %Y")
        return {
            "booking": [
                "hi", "2", "John Smith", check_in, check_out, "2", "0", "1", "1", "1", "1", "done",
            ],
            "rooms": ["hello", "1", "1", "2", "2", "1", "Priya", "menu"],
            "status": ["hi", "5", DEMO_BOOKING_ID.lower(), "2", "XYZ-404", "2", "0"],
        }

    async def send(self, text: str) -> None:
        result = await self.engine.handle(
            InboundMessage(channel_id=CHANNEL_ID, contact_id=GUEST, text=text)
        )
        for message in self.relay.sent[self._printed:]:
            if message.image_url:
                caption = f" ({message.caption})" if message.caption else ""
                print(f"{GREEN}[Hotel] 📷 {message.image_url}{caption}{RESET}")
            else:
                print(f"{GREEN}[Hotel] {message.text}{RESET}")
        self._printed = len(self.relay.sent)
        if result.state is not None:
            self.states.append(result.state.value)
            print(f"{DIM}  >> State: {result.state.value}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  HOTEL CONCIERGE - {title}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.scenarios().get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        for step in steps:
            print(f"\n{BLUE}[Guest] {RESET}{step}")
            await self.send(step)

        self._banner(f"Scenario '{scenario}' complete")
        print(f"{DIM}  State trace: {' -> '.join(self.states)}{RESET}")

    async def run(self) -> None:
        self._banner("Console Demo (type 'quit' to exit)")
        while True:
            user_input = (await asyncio.to_thread(input, f"\n{BLUE}[Guest] {RESET}")).strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                return
            await self.send(user_input)


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=["booking", "rooms", "status"],
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario:
        asyncio.run(session.run_scenario(args.scenario))
    else:
        asyncio.run(session.run())


if __name__ == "__main__":
    main()
