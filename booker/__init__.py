"""End-to-end test toolkit for the restful-booker API."""

__version__ = "0.1.0"

from .config import Configuration
from .exceptions import (
    AuthenticationError,
    BookerError,
    ConfigurationError,
    UnknownBookingField,
)
from .models import (
    AuthRequest,
    AuthResponse,
    Booking,
    BookingDates,
    BookingId,
    BookingResponse,
)
from .data import BookingDataGenerator
from .client import BookerClient
from .session import AuthSession, AuthState

__all__ = [
    "__version__",
    "Configuration",
    "BookerError",
    "ConfigurationError",
    "AuthenticationError",
    "UnknownBookingField",
    "AuthRequest",
    "AuthResponse",
    "Booking",
    "BookingDates",
    "BookingId",
    "BookingResponse",
    "BookingDataGenerator",
    "BookerClient",
    "AuthSession",
    "AuthState",
]
