"""Keyword intent detection for free text typed at the main menu."""

from enum import Enum


class Intent(str, Enum):
    ROOMS = "rooms"
    BOOK = "book"
    LOCATION = "location"
    RECEPTION = "reception"
    STATUS = "status"
    NONE = "none"


# Tried in this order; the first set with a substring hit wins.
INTENT_KEYWORDS: list[tuple[Intent, tuple[str, ...]]] = [
    (Intent.ROOMS, (
        "room", "price", "tariff", "rate", "cost", "amenit", "photo",
    )),
    (Intent.BOOK, (
        "book", "reserve", "reservation", "stay",
    )),
    (Intent.LOCATION, (
        "location", "address", "where", "direction", "map", "reach",
    )),
    (Intent.RECEPTION, (
        "contact", "phone", "call", "timing", "hours", "email", "check-in time",
        "checkout time",
    )),
    (Intent.STATUS, (
        "status", "track", "confirmation", "confirmed",
    )),
]


def detect_intent(text: str) -> Intent:
    """Classify already-lowercased text. Returns Intent.NONE when nothing matches."""
    for intent, keywords in INTENT_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return intent
    return Intent.NONE
