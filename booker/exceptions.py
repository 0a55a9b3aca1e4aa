"""Exceptions raised by the booker client and its helpers."""


class BookerError(Exception):
    """Base exception for all booker errors."""
    pass


class ConfigurationError(BookerError):
    """Raised when the properties resource exists but cannot be read or parsed."""
    pass


class AuthenticationError(BookerError):
    """Raised when the auth bootstrap does not obtain a token."""
    pass


class UnknownBookingField(BookerError, KeyError):
    """Raised when a field mutation names something a Booking does not have."""

    def __init__(self, field: str):
        super().__init__(field)
        self.field = field

    def __str__(self) -> str:
        return f"unknown booking field '{self.field}'"
