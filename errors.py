"""Booking error taxonomy.

Every error carries the single human-readable message that ends up in the
``{"error": ...}`` response body.
"""


class BookingError(Exception):
    message = "Något gick fel."

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class BookingValidationError(BookingError):
    """Malformed user input. Surfaced as 400."""


class InvalidIdentity(BookingValidationError):
    message = "Personnummer måste vara 4 siffror!"


class InvalidEmail(BookingValidationError):
    message = "Skriv in en giltig e-post!"


class InvalidDate(BookingValidationError):
    message = "Du kan bara boka datum under år 2026."


class InvalidPartySize(BookingValidationError):
    message = "Antal personer måste vara mellan 1 och 7."


class DuplicateIdentity(BookingError):
    message = "Dubbelbokning ej tillåten för detta personnummer!"


class StorageError(BookingError):
    """Underlying persistence failure. Surfaced as 500."""

    message = "Databasfel."


class NotificationError(BookingError):
    """Raised inside the notifier only, never propagated to callers."""

    message = "Mail-fel."
