"""Reply texts sent by the booking assistant.

WhatsApp renders ``*bold*`` and ``_italic_``; every menu is numbered so
guests can answer with a single digit.
"""

from decimal import Decimal
from typing import Optional, Sequence

from hotel_concierge.conversation.date_parser import format_display
from hotel_concierge.schemas.booking_schema import BOOKING_STATUS_LABELS, Booking
from hotel_concierge.schemas.catalog_schema import Hotel, RoomOption
from hotel_concierge.schemas.session_schema import BookingData
from hotel_concierge.tools.pricing import stay_total
from hotel_concierge.utils import format_price

MENU_FOOTER = "_Reply 0 anytime for the main menu_"

NOT_UNDERSTOOD = (
    "🤔 Sorry, I didn't understand that. Please reply with one of the options "
    "above, or *0* for the main menu."
)

NUMBER_EMOJIS = ["1️⃣", "2️⃣", "3️⃣", "4️⃣", "5️⃣", "6️⃣", "7️⃣", "8️⃣", "9️⃣", "🔟"]


def _bullet(index: int) -> str:
    if index < len(NUMBER_EMOJIS):
        return NUMBER_EMOJIS[index]
    return f"{index + 1}."


def _price(amount: Optional[Decimal], currency: str) -> str:
    if amount is None:
        return "Price on request"
    return format_price(amount, currency)


# ---------------------------------------------------------------------- #
# Menus and hotel information
# ---------------------------------------------------------------------- #

MAIN_MENU_OPTIONS = [
    "View Rooms & Prices",
    "Book a Room",
    "Location & Directions",
    "Reception & Contact",
    "Check Booking Status",
    "Talk to our Staff",
]


def build_main_menu(hotel: Hotel) -> str:
    lines = [f"🏨 *{hotel.name}*", "", "Reply with a number:", ""]
    for index, label in enumerate(MAIN_MENU_OPTIONS):
        lines.append(f"{_bullet(index)} {label}")
    lines.extend(["", MENU_FOOTER])
    return "\n".join(lines)


def build_welcome(hotel: Hotel) -> str:
    header = f"👋 *Welcome to {hotel.name}!*"
    if hotel.description:
        header += f"\n\n{hotel.description}"
    return f"{header}\n\n{build_main_menu(hotel)}"


def build_location(hotel: Hotel) -> str:
    lines = ["📍 *Hotel Address & Location*", ""]
    if hotel.address:
        lines.append(f"🏨 {hotel.address}")
    if hotel.google_maps_link:
        lines.append(f"🗺️ Google Maps: {hotel.google_maps_link}")
    if not hotel.address and not hotel.google_maps_link:
        lines.append("Please contact reception for directions.")
    lines.extend([
        "",
        f"{_bullet(0)} Book a Room",
        f"{_bullet(1)} View Rooms & Prices",
        "",
        MENU_FOOTER,
    ])
    return "\n".join(lines)


def build_reception(hotel: Hotel) -> str:
    lines = [f"🛎️ *Reception - {hotel.name}*", ""]
    if hotel.description:
        lines.extend([hotel.description, ""])
    if hotel.phone:
        lines.append(f"📞 Phone: {hotel.phone}")
    if hotel.email:
        lines.append(f"📧 Email: {hotel.email}")
    if hotel.website:
        lines.append(f"🌐 Website: {hotel.website}")
    if hotel.reception_timing:
        lines.append(f"🕐 Reception: {hotel.reception_timing}")
    if hotel.languages:
        lines.append(f"🗣️ Languages: {', '.join(hotel.languages)}")
    if hotel.cancellation_policy:
        lines.extend(["", "📋 *Cancellation Policy:*", hotel.cancellation_policy])
    lines.extend(["", "Reply *#* to chat with our staff.", MENU_FOOTER])
    return "\n".join(lines)


def build_handoff(hotel: Hotel, reason: Optional[str] = None) -> str:
    lines = ["🙋 *Connecting you to our team*", ""]
    if reason:
        lines.extend([reason, ""])
    lines.append(f"A member of the {hotel.name} team will reply here shortly.")
    if hotel.reception_timing:
        lines.append(f"Reception hours: {hotel.reception_timing}")
    lines.extend(["", MENU_FOOTER])
    return "\n".join(lines)


# ---------------------------------------------------------------------- #
# Rooms
# ---------------------------------------------------------------------- #

NO_ROOMS = "😔 Sorry, no rooms are available at the moment. Please contact reception."


def build_room_list(hotel: Hotel, options: Sequence[RoomOption], currency: str) -> str:
    lines = [f"🛏️ *Room Types - {hotel.name}*", ""]
    for index, option in enumerate(options):
        lines.append(f"{_bullet(index)} *{option.name}*")
        price = _price(option.base_price, currency)
        suffix = "/night" if option.base_price is not None else ""
        lines.append(f"   {price}{suffix} • Max {option.max_adults} adults")
    lines.extend(["", "Reply with a number to see room details.", MENU_FOOTER])
    return "\n".join(lines)


def build_room_detail(option: RoomOption, currency: str) -> str:
    lines = [f"🏠 *{option.name}*", ""]
    if option.description:
        lines.extend([option.description, ""])
    lines.append(
        f"👥 Capacity: {option.max_adults} Adults, {option.max_children} Children"
    )
    if option.is_ac:
        lines.append("❄️ Air Conditioned")
    if option.base_price is not None:
        lines.append(f"💰 Price: {format_price(option.base_price, currency)}/night")
    else:
        lines.append("💰 Price on request")
    if option.amenities:
        lines.extend(["", "✨ *Amenities:*"])
        lines.extend(f"• {amenity}" for amenity in option.amenities)
    lines.extend([
        "",
        f"{_bullet(0)} Book This Room",
        f"{_bullet(1)} Back to Rooms",
        "",
        MENU_FOOTER,
    ])
    return "\n".join(lines)


# ---------------------------------------------------------------------- #
# Booking flow
# ---------------------------------------------------------------------- #

ASK_NAME = "📝 *Let's start your booking!*\n\nPlease enter your *full name*:"
INVALID_NAME = "❌ Please enter a valid name (at least 2 characters)."
DATE_FORMAT_HINT = "Please use DD/MM/YYYY or a date like *15 Feb 2026*."
CHECKIN_IN_PAST = "❌ The check-in date can't be in the past. Please enter a date from today onwards."
BOOKING_FAILED = "❌ Sorry, we couldn't save your booking right now. Please try again in a little while."
BOOKING_CANCELLED = "❌ Booking cancelled. No reservation was made."
SESSION_SAVE_FAILED = "⚠️ Sorry, something went wrong on our side. Please send your message again."
CONFIRM_DETAILS_HINT = f"Reply {_bullet(0)} to continue or {_bullet(1)} to start over."
FINAL_CONFIRM_HINT = f"Reply {_bullet(0)} to confirm or {_bullet(1)} to cancel."


def build_session_save_failed(booking_id: Optional[str] = None) -> str:
    if booking_id is None:
        return SESSION_SAVE_FAILED
    return (
        f"✅ Your booking *{booking_id}* has been saved, but something went wrong "
        f"on our side. Please keep this Booking ID and reply *menu* to continue."
    )


def ask_check_in(guest_name: str) -> str:
    return (
        f"Thank you, *{guest_name}*!\n\n"
        f"📅 Please enter your *check-in date* (e.g. 15/02/2026 or 15 Feb 2026):"
    )


def invalid_date(field_label: str) -> str:
    return f"❌ That doesn't look like a valid {field_label}. {DATE_FORMAT_HINT}"


def ask_check_out(check_in_display: str) -> str:
    return (
        f"Check-in: *{check_in_display}*\n\n"
        f"📅 Please enter your *check-out date*:"
    )


def checkout_not_after(check_in_display: str) -> str:
    return f"❌ Check-out must be after your check-in date (*{check_in_display}*). Please try again."


def ask_adults(check_out_display: str, nights: int) -> str:
    return (
        f"Check-out: *{check_out_display}* ({nights} night{'s' if nights != 1 else ''})\n\n"
        f"👨 How many *adults* will be staying?"
    )


def invalid_adults(maximum: int) -> str:
    return f"❌ Please enter a number of adults between 1 and {maximum}."


ASK_CHILDREN = "👶 How many *children*? (Reply 0 if none)"


def invalid_children(maximum: int) -> str:
    return f"❌ Please enter a number of children between 0 and {maximum}."


def build_booking_summary(data: BookingData) -> str:
    lines = [
        "📋 *Booking Summary*",
        "",
        f"👤 Name: {data.guest_name}",
        f"📅 Check-in: {format_display(data.check_in)}",
        f"📅 Check-out: {format_display(data.check_out)}",
        f"🌙 Nights: {data.nights}",
        f"👥 Guests: {data.adults} Adults, {data.children} Children",
    ]
    if data.room is not None:
        lines.append(f"🛏️ Room: {data.room.name}")
    lines.extend(["", CONFIRM_DETAILS_HINT])
    return "\n".join(lines)


def build_room_selection(options: Sequence[RoomOption], nights: int, currency: str) -> str:
    lines = ["🛏️ *Please select a room type:*", ""]
    for index, option in enumerate(options):
        total = stay_total(option.base_price, nights)
        if total is None:
            line = f"{_bullet(index)} {option.name} - Price on request"
        else:
            line = (
                f"{_bullet(index)} {option.name} - "
                f"{format_price(option.base_price, currency)}/night "
                f"({format_price(total, currency)} for {nights} nights)"
            )
        lines.append(line)
    return "\n".join(lines)


def build_final_confirmation(data: BookingData, currency: str) -> str:
    room = data.room
    lines = [
        "✅ *Please confirm your booking*",
        "",
        f"👤 Name: {data.guest_name}",
        f"🛏️ Room: {room.name}",
        f"📅 {format_display(data.check_in)} → {format_display(data.check_out)}",
        f"🌙 Nights: {data.nights}",
        f"👥 Guests: {data.adults} Adults, {data.children} Children",
    ]
    total = stay_total(room.base_price, data.nights)
    if total is not None:
        lines.append(
            f"💰 Total: *{format_price(total, currency)}* "
            f"({data.nights} × {format_price(room.base_price, currency)})"
        )
    lines.extend(["", FINAL_CONFIRM_HINT])
    return "\n".join(lines)


def build_booking_created(booking: Booking, currency: str, max_uploads: int) -> str:
    lines = [
        "🎉 *Booking Request Received!*",
        "",
        f"Thank you, *{booking.guest_name}*!",
        "",
        f"📋 Your Booking ID: *{booking.booking_id}*",
        "_Save this ID to check your booking status_",
        "",
        f"🛏️ Room: {booking.room_name}",
        f"📅 {format_display(booking.check_in_date)} → {format_display(booking.check_out_date)}",
        f"👥 Guests: {booking.adults} Adults, {booking.children} Children",
    ]
    if booking.total_price is not None:
        lines.append(f"💰 Total: {format_price(booking.total_price, currency)}")
    lines.extend([
        "",
        "Our team will contact you shortly to confirm availability.",
        "",
        f"🪪 Would you like to upload ID proof now (up to {max_uploads} files)?",
        f"{_bullet(0)} Upload now",
        f"{_bullet(1)} Skip for now",
    ])
    return "\n".join(lines)


# ---------------------------------------------------------------------- #
# Document intake
# ---------------------------------------------------------------------- #

UPLOAD_PROMPT_HINT = f"Reply {_bullet(0)} to upload your ID or {_bullet(1)} to skip."
UPLOAD_REJECTED_TYPE = "❌ Please send a photo or a PDF/Word document of your ID."
UPLOAD_FAILED = "❌ Sorry, we couldn't save that file. Please send it again."
UPLOAD_SKIPPED = "👍 No problem, you can share your ID at check-in."


def build_upload_instructions(max_uploads: int) -> str:
    return (
        f"🪪 Please send a photo or PDF of your ID (up to {max_uploads} files).\n\n"
        f"Reply *done* when finished or *skip* to do this later."
    )


def build_upload_received(count: int, max_uploads: int) -> str:
    if count >= max_uploads:
        return (
            f"✅ Document {count}/{max_uploads} received. That's the maximum.\n\n"
            f"Reply *done* to finish."
        )
    return (
        f"✅ Document {count}/{max_uploads} received.\n\n"
        f"Send another file, or reply *done* when finished."
    )


def build_upload_cap_reached(max_uploads: int) -> str:
    return f"⚠️ You've already uploaded {max_uploads} documents, the maximum. Reply *done* to finish."


def build_upload_waiting_hint(count: int, max_uploads: int) -> str:
    return (
        f"📎 {count}/{max_uploads} documents uploaded. Send a photo or PDF of your ID, "
        f"reply *done* when finished or *skip* to do this later."
    )


def build_upload_summary(count: int) -> str:
    if count == 0:
        return "👍 No documents uploaded. You can share your ID at check-in."
    return f"🙏 Thank you! {count} document{'s' if count != 1 else ''} uploaded for your booking."


# ---------------------------------------------------------------------- #
# Booking status lookup
# ---------------------------------------------------------------------- #

ASK_BOOKING_ID = "🔍 *Check Booking Status*\n\nPlease enter your *Booking ID*:"
NO_CONTACT_BOOKINGS = "😔 We couldn't find any bookings made from this number."
LOOKUP_FAILED = "❌ Sorry, we couldn't look that up right now. Please try again in a little while."

STATUS_OPTIONS = [
    "Modify this booking",
    "Check another booking",
    "Talk to our Staff",
]

NOT_FOUND_OPTIONS = [
    "Try another Booking ID",
    "Find bookings made from my number",
    "Talk to our Staff",
]


def _numbered(options: Sequence[str]) -> list[str]:
    return [f"{_bullet(index)} {label}" for index, label in enumerate(options)]


def build_booking_status(booking: Booking, currency: str) -> str:
    emoji, label = BOOKING_STATUS_LABELS[booking.status]
    lines = [
        "📋 *Booking Status*",
        "",
        f"🔖 Booking ID: *{booking.booking_id}*",
        f"{emoji} Status: *{label}*",
        "",
        f"👤 Name: {booking.guest_name}",
        f"🛏️ Room: {booking.room_name}",
        f"📅 Check-in: {format_display(booking.check_in_date)}",
        f"📅 Check-out: {format_display(booking.check_out_date)}",
        f"👥 Guests: {booking.adults} Adults, {booking.children} Children",
    ]
    if booking.total_price is not None:
        lines.append(f"💰 Total: {format_price(booking.total_price, currency)}")
    lines.append("")
    lines.extend(_numbered(STATUS_OPTIONS))
    lines.extend(["", MENU_FOOTER])
    return "\n".join(lines)


def build_not_found_options() -> str:
    return "\n".join(_numbered(NOT_FOUND_OPTIONS) + ["", MENU_FOOTER])


def build_booking_not_found(query: str) -> str:
    return f"❌ Booking ID *{query}* was not found.\n\n{build_not_found_options()}"


def build_no_contact_bookings() -> str:
    return f"{NO_CONTACT_BOOKINGS}\n\n{build_not_found_options()}"


def build_contact_bookings(bookings: Sequence[Booking]) -> str:
    lines = ["📚 *Your recent bookings*", ""]
    for booking in bookings:
        emoji, label = BOOKING_STATUS_LABELS[booking.status]
        lines.append(
            f"🔖 *{booking.booking_id}* - {format_display(booking.check_in_date)} "
            f"({emoji} {label})"
        )
    lines.extend(["", "Reply with a Booking ID to see its details."])
    return "\n".join(lines)


def build_modify_request(booking_id: str) -> str:
    return f"You'd like to change booking *{booking_id}*. Our staff will help you with that."
