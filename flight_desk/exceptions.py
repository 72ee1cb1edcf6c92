from __future__ import annotations


class FlightDeskError(RuntimeError):
    """Base error carrying a message that is safe to show to the user."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, reason: str = "", user_message: str | None = None) -> None:
        super().__init__(reason or self.user_message)
        self.reason = reason
        if user_message is not None:
            self.user_message = user_message


class ValidationError(FlightDeskError):
    """The search request is malformed; raised before any I/O."""

    user_message = "Please check your airports and date and try again."


class ProviderError(FlightDeskError):
    """A flight or airport data provider failed."""

    user_message = (
        "Unable to search flights. Please verify your airport codes and try again."
    )


class IncompleteOfferError(FlightDeskError):
    """A booking was attempted against an offer without leg data."""

    user_message = "Flight information is incomplete."


class PersistenceError(FlightDeskError):
    """Stored history could not be read. Logged, never raised to callers."""

    user_message = "Saved history could not be read and was reset."


__all__ = [
    "FlightDeskError",
    "ValidationError",
    "ProviderError",
    "IncompleteOfferError",
    "PersistenceError",
]
