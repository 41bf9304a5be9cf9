"""Tests for the dialogue state machine's top-level states and global commands."""

from datetime import date

import pytest

from hotel_concierge.conversation import replies
from hotel_concierge.conversation.state_machine import STATE_HANDLERS
from hotel_concierge.schemas.catalog_schema import RoomOption
from hotel_concierge.schemas.session_schema import (
    BookingData,
    DialogueState,
    IdleData,
    LookupData,
    RoomBrowseData,
    STATE_FLOWS,
    Session,
    UploadData,
)
from tests.conftest import make_context, make_rooms, msg, walk


def _sample_session(state: DialogueState) -> Session:
    """A valid session sitting in ``state`` with plausible flow data."""
    option = RoomOption.from_room(make_rooms()[0])
    booking = BookingData(
        guest_name="John Smith",
        check_in=date(2026, 2, 10),
        check_out=date(2026, 2, 12),
        adults=2,
        children=0,
        room=option,
        room_options=(option,),
    )
    flow = {
        "idle": IdleData(),
        "browse": RoomBrowseData(options=(option,), selected=option),
        "booking": booking,
        "upload": UploadData(booking_id="SVR-ABCD2345", uploaded=1),
        "lookup": LookupData(query="SVR-ABCD2345", booking_id="SVR-ABCD2345"),
    }
    return Session(state=state, data=flow[STATE_FLOWS[state]])


class TestHandlerTable:
    def test_every_state_has_a_handler(self):
        assert set(STATE_HANDLERS) == set(DialogueState)

    def test_handlers_resolve_to_methods(self, machine):
        for name in STATE_HANDLERS.values():
            assert callable(getattr(machine, name))


class TestWelcomeAndMainMenu:
    def test_first_message_shows_welcome(self, machine, ctx):
        result = machine.transition(Session(), msg("anything"), ctx)
        assert result.state == DialogueState.MAIN_MENU
        assert "Welcome to Sea View Resort" in result.reply

    def test_greeting_shows_welcome_menu(self, machine, ctx):
        result = walk(machine, ctx, "hi")
        assert result.state == DialogueState.MAIN_MENU
        assert "Reply with a number" in result.reply

    def test_menu_lists_six_options(self, ctx):
        menu = replies.build_main_menu(ctx.hotel)
        for label in replies.MAIN_MENU_OPTIONS:
            assert label in menu
        assert len(replies.MAIN_MENU_OPTIONS) == 6

    @pytest.mark.parametrize("choice, state", [
        ("1", DialogueState.ROOMS_LIST),
        ("2", DialogueState.BOOKING_NAME),
        ("3", DialogueState.LOCATION),
        ("4", DialogueState.MAIN_MENU),
        ("5", DialogueState.CHECK_BOOKING_ID),
        ("6", DialogueState.HUMAN_HANDOFF),
    ])
    def test_numbered_choices(self, machine, ctx, choice, state):
        assert walk(machine, ctx, "hi", choice).state == state

    @pytest.mark.parametrize("text, state", [
        ("what are your room rates?", DialogueState.ROOMS_LIST),
        ("I want to book", DialogueState.BOOKING_NAME),
        ("where are you", DialogueState.LOCATION),
        ("track my status", DialogueState.CHECK_BOOKING_ID),
    ])
    def test_free_text_intents(self, machine, ctx, text, state):
        assert walk(machine, ctx, "hi", text).state == state

    def test_reception_details(self, machine, ctx):
        result = walk(machine, ctx, "hi", "4")
        assert "+91 832 555 0100" in result.reply
        assert "Free cancellation" in result.reply
        assert "English, Hindi" in result.reply

    def test_unrecognized_input_keeps_state(self, machine, ctx):
        menu = walk(machine, ctx, "hi")
        result = machine.transition(menu.session, msg("tell me a joke"), ctx)
        assert result.session == menu.session
        assert result.reply == replies.NOT_UNDERSTOOD

    def test_out_of_range_number(self, machine, ctx):
        menu = walk(machine, ctx, "hi")
        result = machine.transition(menu.session, msg("9"), ctx)
        assert result.reply == replies.NOT_UNDERSTOOD


class TestGlobalReset:
    @pytest.mark.parametrize(
        "state", [s for s in DialogueState if s != DialogueState.ID_UPLOAD_WAITING]
    )
    def test_reset_from_every_state(self, machine, ctx, state):
        result = machine.transition(_sample_session(state), msg("menu"), ctx)
        assert result.state == DialogueState.MAIN_MENU
        assert result.session.data == IdleData()
        assert result.reply == replies.build_main_menu(ctx.hotel)

    @pytest.mark.parametrize("state", [
        s for s in DialogueState
        if s not in (DialogueState.ID_UPLOAD_WAITING, DialogueState.BOOKING_CHILDREN)
    ])
    def test_zero_resets_from_other_states(self, machine, ctx, state):
        result = machine.transition(_sample_session(state), msg("0"), ctx)
        assert result.state == DialogueState.MAIN_MENU
        assert result.session.data == IdleData()
        assert result.reply == replies.build_main_menu(ctx.hotel)

    def test_zero_answers_children_question(self, machine, ctx):
        result = machine.transition(_sample_session(DialogueState.BOOKING_CHILDREN), msg("0"), ctx)
        assert result.state == DialogueState.BOOKING_CONFIRM_DETAILS
        assert result.session.data.children == 0

    def test_reset_is_idempotent(self, machine, ctx):
        first = machine.transition(_sample_session(DialogueState.BOOKING_ADULTS), msg("menu"), ctx)
        second = machine.transition(first.session, msg("menu"), ctx)
        assert first.reply == second.reply
        assert first.session == second.session

    @pytest.mark.parametrize("text", ["0", "menu"])
    def test_upload_waiting_is_exempt_from_reset(self, machine, ctx, text):
        session = _sample_session(DialogueState.ID_UPLOAD_WAITING)
        result = machine.transition(session, msg(text), ctx)
        assert result.state == DialogueState.ID_UPLOAD_WAITING
        assert result.session.data.uploaded == 1
        assert "1/3 documents uploaded" in result.reply


class TestHandoff:
    def test_hash_enters_handoff(self, machine, ctx):
        result = walk(machine, ctx, "hi", "#")
        assert result.state == DialogueState.HUMAN_HANDOFF
        assert "Connecting you to our team" in result.reply

    def test_messages_during_handoff_are_silent(self, machine, ctx):
        handoff = walk(machine, ctx, "hi", "6")
        result = machine.transition(handoff.session, msg("My flight is delayed"), ctx)
        assert result.reply is None
        assert result.state == DialogueState.HUMAN_HANDOFF

    def test_greeting_does_not_interrupt_handoff(self, machine, ctx):
        handoff = walk(machine, ctx, "hi", "6")
        result = machine.transition(handoff.session, msg("hello"), ctx)
        assert result.state == DialogueState.HUMAN_HANDOFF
        assert result.reply is None

    def test_menu_leaves_handoff(self, machine, ctx):
        handoff = walk(machine, ctx, "hi", "6")
        assert machine.transition(handoff.session, msg("0"), ctx).state == DialogueState.MAIN_MENU


class TestRoomBrowsing:
    def test_room_list_is_numbered(self, machine, ctx):
        result = walk(machine, ctx, "hi", "1")
        assert "1️⃣ *Deluxe Room*" in result.reply
        assert "₹2,000/night" in result.reply
        assert "Price on request" in result.reply
        assert len(result.session.data.options) == 3

    def test_selection_resolves_against_frozen_list(self, machine, ctx):
        listed = walk(machine, ctx, "hi", "1")
        # Catalog changes after the list was shown
        changed = make_context(rooms=list(reversed(make_rooms())))
        result = machine.transition(listed.session, msg("1"), changed)
        assert result.state == DialogueState.ROOM_DETAIL
        assert result.session.data.selected.name == "Deluxe Room"

    def test_detail_sends_photos_capped(self, machine, ctx, bot_config):
        result = walk(machine, ctx, "hi", "1", "1")
        assert len(result.media) == bot_config.max_room_photos
        assert result.media[0].caption == "Deluxe Room"
        assert all(item.caption is None for item in result.media[1:])

    def test_room_without_photos(self, machine, ctx):
        result = walk(machine, ctx, "hi", "1", "2")
        assert result.media == []
        assert "Sea View Suite" in result.reply

    def test_book_this_room_preselects(self, machine, ctx):
        result = walk(machine, ctx, "hi", "1", "2", "1")
        assert result.state == DialogueState.BOOKING_NAME
        assert result.session.data.room.name == "Sea View Suite"
        assert result.session.data.room_preselected

    def test_back_to_rooms(self, machine, ctx):
        result = walk(machine, ctx, "hi", "1", "1", "2")
        assert result.state == DialogueState.ROOMS_LIST

    def test_invalid_room_number(self, machine, ctx):
        listed = walk(machine, ctx, "hi", "1")
        result = machine.transition(listed.session, msg("4"), ctx)
        assert result.session == listed.session
        assert result.reply == replies.NOT_UNDERSTOOD

    def test_no_rooms_returns_to_menu(self, machine):
        empty = make_context(rooms=[])
        result = walk(machine, empty, "hi", "1")
        assert result.state == DialogueState.MAIN_MENU
        assert replies.NO_ROOMS in result.reply


class TestLocation:
    def test_location_reply(self, machine, ctx):
        result = walk(machine, ctx, "hi", "3")
        assert "12 Beach Road" in result.reply
        assert "https://maps.example/seaview" in result.reply

    def test_location_book(self, machine, ctx):
        assert walk(machine, ctx, "hi", "3", "1").state == DialogueState.BOOKING_NAME

    def test_location_rooms(self, machine, ctx):
        assert walk(machine, ctx, "hi", "3", "2").state == DialogueState.ROOMS_LIST


class TestNumericReplies:
    MENU_STATES = [
        DialogueState.MAIN_MENU,
        DialogueState.LOCATION,
        DialogueState.ROOMS_LIST,
        DialogueState.ROOM_DETAIL,
        DialogueState.BOOKING_ROOM_SELECT,
        DialogueState.BOOKING_STATUS_OPTIONS,
        DialogueState.BOOKING_NOT_FOUND,
    ]

    @pytest.mark.parametrize("state", MENU_STATES)
    @pytest.mark.parametrize("text", ["²", "⑦", "1²"])
    def test_digit_like_characters_are_not_choices(self, machine, ctx, state, text):
        session = _sample_session(state)
        result = machine.transition(session, msg(text), ctx)
        assert result.session == session
        assert result.reply == replies.NOT_UNDERSTOOD

    def test_full_width_digit_is_a_choice(self, machine, ctx):
        menu = walk(machine, ctx, "hi")
        result = machine.transition(menu.session, msg("３"), ctx)
        assert result.state == DialogueState.LOCATION
