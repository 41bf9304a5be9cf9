"""Tests for the booking status lookup sub-flow."""

import pytest

from hotel_concierge.conversation import replies
from hotel_concierge.conversation.effects import (
    EffectOutcome,
    FindBookingById,
    FindBookingsByContact,
)
from hotel_concierge.schemas.booking_schema import BookingStatus
from hotel_concierge.schemas.session_schema import DialogueState
from tests.conftest import GUEST, make_booking, msg, walk


def _lookup(machine, ctx, text):
    asked = walk(machine, ctx, "hi", "5")
    return machine.transition(asked.session, msg(text), ctx)


class TestLookupById:
    def test_query_is_normalized(self, machine, ctx):
        pending = _lookup(machine, ctx, "  svr-abcd2345 ")
        assert pending.effect == FindBookingById(hotel_id="hotel-1", booking_id="SVR-ABCD2345")

    def test_found(self, machine, ctx):
        pending = _lookup(machine, ctx, "SVR-ABCD2345")
        result = machine.resume(
            pending.session, pending.effect, EffectOutcome(ok=True, booking=make_booking()), ctx
        )
        assert result.state == DialogueState.BOOKING_STATUS_OPTIONS
        assert result.session.data.booking_id == "SVR-ABCD2345"
        assert "🟡 Status: *Pending Confirmation*" in result.reply
        assert "₹4,000" in result.reply

    @pytest.mark.parametrize("status, label", [
        (BookingStatus.CONFIRMED, "🟢 Status: *Confirmed*"),
        (BookingStatus.CANCELLED, "🔴 Status: *Cancelled*"),
        (BookingStatus.CHECKED_IN, "🔵 Status: *Checked In*"),
        (BookingStatus.CHECKED_OUT, "⚪ Status: *Checked Out*"),
    ])
    def test_status_labels(self, status, label):
        assert label in replies.build_booking_status(make_booking(status=status), "₹")

    def test_not_found(self, machine, ctx):
        pending = _lookup(machine, ctx, "XYZ-404")
        result = machine.resume(pending.session, pending.effect, EffectOutcome(ok=True), ctx)
        assert result.state == DialogueState.BOOKING_NOT_FOUND
        assert "*XYZ-404* was not found" in result.reply
        assert "Find bookings made from my number" in result.reply

    def test_store_error(self, machine, ctx):
        pending = _lookup(machine, ctx, "XYZ-404")
        result = machine.resume(
            pending.session, pending.effect, EffectOutcome.failed("timeout"), ctx
        )
        assert result.state == DialogueState.CHECK_BOOKING_ID
        assert result.reply == replies.LOOKUP_FAILED


class TestStatusOptions:
    def _found(self, machine, ctx):
        pending = _lookup(machine, ctx, "SVR-ABCD2345")
        return machine.resume(
            pending.session, pending.effect, EffectOutcome(ok=True, booking=make_booking()), ctx
        )

    def test_modify_hands_off_with_booking_id(self, machine, ctx):
        found = self._found(machine, ctx)
        result = machine.transition(found.session, msg("1"), ctx)
        assert result.state == DialogueState.HUMAN_HANDOFF
        assert "SVR-ABCD2345" in result.reply

    def test_check_another(self, machine, ctx):
        found = self._found(machine, ctx)
        result = machine.transition(found.session, msg("2"), ctx)
        assert result.state == DialogueState.CHECK_BOOKING_ID
        assert result.reply == replies.ASK_BOOKING_ID

    def test_staff(self, machine, ctx):
        found = self._found(machine, ctx)
        assert machine.transition(found.session, msg("3"), ctx).state == DialogueState.HUMAN_HANDOFF

    def test_unrecognized(self, machine, ctx):
        found = self._found(machine, ctx)
        result = machine.transition(found.session, msg("4"), ctx)
        assert result.session == found.session


class TestNotFoundOptions:
    def _missed(self, machine, ctx):
        pending = _lookup(machine, ctx, "XYZ-404")
        return machine.resume(pending.session, pending.effect, EffectOutcome(ok=True), ctx)

    def test_retry(self, machine, ctx):
        missed = self._missed(machine, ctx)
        assert machine.transition(missed.session, msg("1"), ctx).state == DialogueState.CHECK_BOOKING_ID

    def test_list_by_contact(self, machine, ctx, bot_config):
        missed = self._missed(machine, ctx)
        pending = machine.transition(missed.session, msg("2"), ctx)
        assert pending.effect == FindBookingsByContact(
            hotel_id="hotel-1", contact_id=GUEST, limit=bot_config.recent_bookings_limit
        )
        bookings = [make_booking("SVR-NEW23456"), make_booking("SVR-OLD23456")]
        result = machine.resume(
            pending.session, pending.effect, EffectOutcome(ok=True, bookings=bookings), ctx
        )
        assert result.state == DialogueState.CHECK_BOOKING_ID
        assert result.reply.index("SVR-NEW23456") < result.reply.index("SVR-OLD23456")

    def test_no_bookings_for_contact(self, machine, ctx):
        missed = self._missed(machine, ctx)
        pending = machine.transition(missed.session, msg("2"), ctx)
        result = machine.resume(pending.session, pending.effect, EffectOutcome(ok=True), ctx)
        assert result.state == DialogueState.BOOKING_NOT_FOUND
        assert replies.NO_CONTACT_BOOKINGS in result.reply

    def test_staff(self, machine, ctx):
        missed = self._missed(machine, ctx)
        assert machine.transition(missed.session, msg("3"), ctx).state == DialogueState.HUMAN_HANDOFF
