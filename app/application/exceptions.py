
class BookingEngineError(Exception):
    """Base class for errors surfaced by the availability and booking use cases."""
    pass


class ValidationError(BookingEngineError):
    """Raised on malformed input (bad time label, bad date, empty service list). Caller-fixable."""
    pass


class InvalidSelection(BookingEngineError):
    """Raised when a staged selection does not resolve to an open slot and real services."""
    pass


class SlotUnavailable(BookingEngineError):
    """Raised by the availability store when the requested time is not in the published list."""
    pass


class BookingConflict(BookingEngineError):
    """Raised when confirmation loses the race for a slot. Re-fetch availability, never retry blindly."""
    pass


class NotFound(BookingEngineError):
    pass


class Forbidden(BookingEngineError):
    pass


class InvalidTransition(BookingEngineError):
    """Raised when a booking status change is not allowed from its current status."""
    pass


class NotCancellable(InvalidTransition):
    """Raised when cancelling a booking that is already completed or cancelled."""
    pass
