"""
Per-contact dialogue session.

The session's ``data`` is a tagged union keyed by ``flow``: each group of
states carries only the fields meaningful to it, and a session whose data
does not fit its state fails validation. Returning to the main menu always
swaps the data for an empty ``IdleData``.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hotel_concierge.schemas.catalog_schema import RoomOption
from hotel_concierge.tools.pricing import count_nights


class DialogueState(str, Enum):
    """All states of the booking assistant."""
    WELCOME = "welcome"
    MAIN_MENU = "main_menu"
    ROOMS_LIST = "rooms_list"
    ROOM_DETAIL = "room_detail"
    LOCATION = "location"
    HUMAN_HANDOFF = "human_handoff"
    BOOKING_NAME = "booking_name"
    BOOKING_CHECKIN = "booking_checkin"
    BOOKING_CHECKOUT = "booking_checkout"
    BOOKING_ADULTS = "booking_adults"
    BOOKING_CHILDREN = "booking_children"
    BOOKING_CONFIRM_DETAILS = "booking_confirm_details"
    BOOKING_ROOM_SELECT = "booking_room_select"
    BOOKING_FINAL_CONFIRM = "booking_final_confirm"
    ID_UPLOAD_PROMPT = "id_upload_prompt"
    ID_UPLOAD_WAITING = "id_upload_waiting"
    CHECK_BOOKING_ID = "check_booking_id"
    BOOKING_STATUS_OPTIONS = "booking_status_options"
    BOOKING_NOT_FOUND = "booking_not_found"


class IdleData(BaseModel):
    model_config = ConfigDict(frozen=True)

    flow: Literal["idle"] = "idle"


class RoomBrowseData(BaseModel):
    model_config = ConfigDict(frozen=True)

    flow: Literal["browse"] = "browse"
    options: tuple[RoomOption, ...] = ()
    selected: Optional[RoomOption] = None


class BookingData(BaseModel):
    """Guest details accumulated one step at a time by the booking flow."""
    model_config = ConfigDict(frozen=True)

    flow: Literal["booking"] = "booking"
    guest_name: Optional[str] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    adults: Optional[int] = None
    children: Optional[int] = None
    room: Optional[RoomOption] = None
    room_preselected: bool = False
    room_options: tuple[RoomOption, ...] = ()

    @property
    def nights(self) -> int:
        if self.check_in is None or self.check_out is None:
            return 0
        return count_nights(self.check_in, self.check_out)


class UploadData(BaseModel):
    model_config = ConfigDict(frozen=True)

    flow: Literal["upload"] = "upload"
    booking_id: str
    uploaded: int = 0


class LookupData(BaseModel):
    model_config = ConfigDict(frozen=True)

    flow: Literal["lookup"] = "lookup"
    query: Optional[str] = None
    booking_id: Optional[str] = None


FlowData = Annotated[
    Union[IdleData, RoomBrowseData, BookingData, UploadData, LookupData],
    Field(discriminator="flow"),
]


STATE_FLOWS: dict[DialogueState, str] = {
    DialogueState.WELCOME: "idle",
    DialogueState.MAIN_MENU: "idle",
    DialogueState.LOCATION: "idle",
    DialogueState.HUMAN_HANDOFF: "idle",
    DialogueState.ROOMS_LIST: "browse",
    DialogueState.ROOM_DETAIL: "browse",
    DialogueState.BOOKING_NAME: "booking",
    DialogueState.BOOKING_CHECKIN: "booking",
    DialogueState.BOOKING_CHECKOUT: "booking",
    DialogueState.BOOKING_ADULTS: "booking",
    DialogueState.BOOKING_CHILDREN: "booking",
    DialogueState.BOOKING_CONFIRM_DETAILS: "booking",
    DialogueState.BOOKING_ROOM_SELECT: "booking",
    DialogueState.BOOKING_FINAL_CONFIRM: "booking",
    DialogueState.ID_UPLOAD_PROMPT: "upload",
    DialogueState.ID_UPLOAD_WAITING: "upload",
    DialogueState.CHECK_BOOKING_ID: "lookup",
    DialogueState.BOOKING_STATUS_OPTIONS: "lookup",
    DialogueState.BOOKING_NOT_FOUND: "lookup",
}

_DETAILS = ("guest_name", "check_in", "check_out", "adults", "children")

# Fields that must already be collected when a state is entered
STATE_PREREQUISITES: dict[DialogueState, tuple[str, ...]] = {
    DialogueState.ROOM_DETAIL: ("selected",),
    DialogueState.BOOKING_CHECKIN: _DETAILS[:1],
    DialogueState.BOOKING_CHECKOUT: _DETAILS[:2],
    DialogueState.BOOKING_ADULTS: _DETAILS[:3],
    DialogueState.BOOKING_CHILDREN: _DETAILS[:4],
    DialogueState.BOOKING_CONFIRM_DETAILS: _DETAILS,
    DialogueState.BOOKING_ROOM_SELECT: _DETAILS + ("room_options",),
    DialogueState.BOOKING_FINAL_CONFIRM: _DETAILS + ("room",),
    DialogueState.BOOKING_STATUS_OPTIONS: ("booking_id",),
}


class Session(BaseModel):
    """Durable dialogue state for one (tenant, contact) pair."""
    model_config = ConfigDict(frozen=True)

    state: DialogueState = DialogueState.WELCOME
    data: FlowData = Field(default_factory=IdleData)
    last_interaction_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_data_fits_state(self) -> "Session":
        expected = STATE_FLOWS[self.state]
        if self.data.flow != expected:
            raise ValueError(
                f"State '{self.state.value}' expects '{expected}' data, "
                f"got '{self.data.flow}'"
            )
        missing = [
            name for name in STATE_PREREQUISITES.get(self.state, ())
            if getattr(self.data, name) in (None, ())
        ]
        if missing:
            raise ValueError(
                f"State '{self.state.value}' is missing: {', '.join(missing)}"
            )
        return self

    def enter(
        self,
        state: DialogueState,
        data: Optional[Union[IdleData, RoomBrowseData, BookingData, UploadData, LookupData]] = None,
    ) -> "Session":
        """Build the successor session; omitted data means the flow is cleared."""
        return Session(
            state=state,
            data=data if data is not None else IdleData(),
            last_interaction_at=self.last_interaction_at,
        )

    def touch(self, now: datetime) -> "Session":
        return self.model_copy(update={"last_interaction_at": now})
