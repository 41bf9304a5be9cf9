"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_session_schema(self):
        from hotel_concierge.schemas.session_schema import DialogueState, IdleData, Session
        session = Session()
        assert session.state == DialogueState.WELCOME
        assert isinstance(session.data, IdleData)

    def test_import_booking_schema(self):
        from hotel_concierge.schemas.booking_schema import Booking, BookingStatus, NewBooking
        assert BookingStatus.PENDING == "pending"
        assert issubclass(Booking, NewBooking)

    def test_import_catalog_and_message_schemas(self):
        from hotel_concierge.schemas.catalog_schema import Hotel, RoomOption, RoomPhoto, RoomType
        from hotel_concierge.schemas.message_schema import Attachment, InboundMessage, MediaItem
        assert InboundMessage(channel_id="c", contact_id="+1").conversation_id == "c:+1"


class TestConversationImports:
    def test_package_reexports(self):
        from hotel_concierge.conversation import (
            CommandKind,
            DialogueStateMachine,
            EffectOutcome,
            Intent,
            detect_intent,
            parse_date,
        )
        assert detect_intent("where is the hotel") == Intent.LOCATION
        assert EffectOutcome.failed("x").ok is False

    def test_every_state_has_a_handler(self):
        from hotel_concierge.conversation.state_machine import STATE_HANDLERS, DialogueStateMachine
        from hotel_concierge.schemas.session_schema import DialogueState
        machine = DialogueStateMachine()
        for state in DialogueState:
            assert callable(getattr(machine, STATE_HANDLERS[state]))


class TestToolImports:
    def test_ports_are_satisfied_by_memory_adapters(self):
        from hotel_concierge.tools.booking import InMemoryBookingStore
        from hotel_concierge.tools.catalog import InMemoryCatalog
        from hotel_concierge.tools.media import InMemoryMediaRelay
        from hotel_concierge.tools.sessions import InMemorySessionStore
        from hotel_concierge.tools.transcript import InMemoryTranscriptSink
        assert InMemoryCatalog() is not None
        assert len(InMemoryBookingStore()) == 0
        assert len(InMemorySessionStore()) == 0
        assert InMemoryMediaRelay().sent == []
        assert InMemoryTranscriptSink().entries == []

    def test_whatsapp_relay(self):
        from hotel_concierge.tools.whatsapp import WhatsAppCloudRelay
        assert WhatsAppCloudRelay is not None


class TestEngineImports:
    def test_import_engine(self):
        from hotel_concierge.engine import DialogueEngine, EngineResult
        assert EngineResult(processed=False).delivered is True

    def test_console_demo(self):
        from datetime import date

        from console_demo import DEMO_BOOKING_ID, build_bookings
        assert build_bookings(date(2026, 1, 15)).get(DEMO_BOOKING_ID) is not None
