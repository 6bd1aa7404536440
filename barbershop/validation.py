# barbershop/validation.py
"""Field rules for an appointment request.

The booking client runs these before any network call and the API runs the
same rules on every request body, so both sides reject the same input with
the same message.
"""

import re
from datetime import date, datetime
from typing import Optional

from .data import SERVICES, TIME_SLOTS

PHONE_PATTERN = re.compile(r"^[0-9]{10,15}$")

MSG_NAME_REQUIRED = "Name is required"
MSG_PHONE_INVALID = "Phone must contain only digits and be 10 to 15 digits long"
MSG_DATE_REQUIRED = "Date is required"
MSG_DATE_INVALID = "Date must be in YYYY-MM-DD format"
MSG_DATE_PAST = "Date cannot be in the past"
MSG_DATE_CLOSED = "The shop is closed on that day"
MSG_TIME_REQUIRED = "Time is required"
MSG_TIME_INVALID = "Time must be one of the half-hour slots between 09:00 and 22:00"
MSG_SERVICE_REQUIRED = "A service must be selected"
MSG_SERVICE_INVALID = "Service not available"


def check_name(name: Optional[str]) -> Optional[str]:
    if not name or not name.strip():
        return MSG_NAME_REQUIRED
    return None


def check_phone(phone: Optional[str]) -> Optional[str]:
    if not phone or not PHONE_PATTERN.fullmatch(phone):
        return MSG_PHONE_INVALID
    return None


def parse_date(value) -> Optional[date]:
    """Accept a date or a "YYYY-MM-DD" string; return None if unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except ValueError:
        return None


def check_date(value, today: Optional[date] = None, closed_weekday: Optional[int] = None) -> Optional[str]:
    if value is None or value == "":
        return MSG_DATE_REQUIRED
    day = parse_date(value)
    if day is None:
        return MSG_DATE_INVALID
    if day < (today or date.today()):
        return MSG_DATE_PAST
    if closed_weekday is not None and day.weekday() == closed_weekday:
        return MSG_DATE_CLOSED
    return None


def check_time(value: Optional[str]) -> Optional[str]:
    if not value:
        return MSG_TIME_REQUIRED
    if value not in TIME_SLOTS:
        return MSG_TIME_INVALID
    return None


def check_service(value: Optional[str]) -> Optional[str]:
    if not value:
        return MSG_SERVICE_REQUIRED
    if value not in SERVICES:
        return MSG_SERVICE_INVALID
    return None


def validate_fields(
    name: Optional[str],
    phone: Optional[str],
    date_value,
    time_value: Optional[str],
    service: Optional[str],
    today: Optional[date] = None,
    closed_weekday: Optional[int] = None,
) -> dict[str, str]:
    """Run every field rule and return a field -> message mapping.

    An empty mapping means the request may be submitted.
    """
    checks = {
        "name": check_name(name),
        "phone": check_phone(phone),
        "date": check_date(date_value, today=today, closed_weekday=closed_weekday),
        "time": check_time(time_value),
        "service": check_service(service),
    }
    return {field: message for field, message in checks.items() if message is not None}
