"""Exception hierarchy for the dialogue engine and its collaborators."""


class ConciergeError(Exception):
    """Base class for all engine and collaborator errors."""


class PersistenceError(ConciergeError):
    """A booking write was rejected by the data store."""


class DuplicateBookingIdError(PersistenceError):
    """The generated booking identifier already exists."""


class SessionStoreError(ConciergeError):
    """The session store rejected an upsert."""


class StoreUnavailableError(ConciergeError):
    """The data store cannot be reached at all.

    Never handled inside the engine: the whole inbound event fails and
    the messaging gateway is expected to redeliver it.
    """


class MediaRelayError(ConciergeError):
    """Fetching an inbound attachment or storing a document failed."""


class DeliveryError(ConciergeError):
    """An outbound text or image could not be delivered."""
