# barbershop/errors.py

from typing import Optional


class BookingError(Exception):
    """Base class for failures the API reports as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidBookingError(BookingError):
    status_code = 422

    def __init__(self, message: str, fields: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.fields = fields or {}


class ConflictError(BookingError):
    """The requested slot is already taken. An expected outcome, not a fault."""

    status_code = 400


class QueryError(BookingError):
    status_code = 500


class WriteError(BookingError):
    status_code = 500


class NetworkError(Exception):
    """The booking client could not reach the API."""
