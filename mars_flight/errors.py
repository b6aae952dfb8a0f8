"""Errors raised by the flight engine and its collaborators.

Out-of-range *inputs* raise; out-of-range *results* are clamped instead.
Every error is raised before any state change is applied.
"""


class FlightError(RuntimeError):
    """Base class for every flight engine error."""


class InputValidationError(FlightError, ValueError):
    """Raised for out-of-range fuel input or non-positive rocket stats."""


class ConflictError(FlightError):
    """Raised when an operation does not fit the session's current state.

    Covers terminal sessions, round-number mismatches, phase order violations and
    stale versions on save.
    """


class NotFoundError(FlightError, LookupError):
    """Raised for an unknown session or rocket, or a round without events."""
