# barbershop/client.py
"""Booking form logic, independent of any UI toolkit.

``BookingForm`` holds what a booking screen shows: the request being typed,
the field errors, the occupied slots for the chosen day and the success or
error notice. It talks to the API with an ``httpx.Client``, so it can point at
a running server or at FastAPI's ``TestClient``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, fields, replace
from datetime import date as Date
from typing import Callable, Optional

import httpx

from .config import Settings
from .data import CLOSED_WEEKDAY, TIME_SLOTS
from .errors import NetworkError
from .validation import parse_date, validate_fields

logger = logging.getLogger(__name__)

MSG_SLOT_TAKEN = "An appointment is already booked for this date and time"
MSG_AVAILABILITY_FAILED = "Could not check availability"
MSG_BOOKING_FAILED = "Could not book the appointment, please try again"
MSG_NETWORK = "Could not reach the booking server"
MSG_SLOT_NOT_CHOSEN = "Choose a date and time first"


@dataclass(frozen=True)
class BookingRequest:
    name: str = ""
    phone: str = ""
    date: Optional[Date] = None
    time: str = ""
    service: str = ""

    def with_changes(self, **changes) -> BookingRequest:
        return replace(self, **changes)

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "phone": self.phone,
            "date": self.date.isoformat() if self.date else None,
            "time": self.time,
            "service": self.service,
        }


FORM_FIELDS = frozenset(f.name for f in fields(BookingRequest))


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return default


class BookingForm:
    def __init__(
        self,
        http: httpx.Client,
        closed_weekday: Optional[int] = CLOSED_WEEKDAY,
        success_notice_seconds: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
        today: Callable[[], Date] = Date.today,
    ):
        self.http = http
        self.closed_weekday = closed_weekday
        self.success_notice_seconds = success_notice_seconds
        self._clock = clock
        self._today = today

        self.request = BookingRequest()
        self.errors: dict[str, str] = {}
        self.form_error = ""
        self.occupied: frozenset[str] = frozenset()
        self.day_fully_booked = False
        self.fully_booked_dates: set[Date] = set()
        self.is_submitting = False

        self._success_message = ""
        self._success_shown_at: Optional[float] = None
        self._closed = False
        self._owns_http = False

    @classmethod
    def from_settings(cls, settings: Settings) -> BookingForm:
        http = httpx.Client(base_url=settings.api_base_url, timeout=10.0)
        form = cls(
            http,
            closed_weekday=settings.closed_weekday,
            success_notice_seconds=settings.success_notice_seconds,
        )
        form._owns_http = True
        return form

    def close(self) -> None:
        """Tear the form down; responses arriving afterwards are ignored."""
        self._closed = True
        if self._owns_http:
            self.http.close()

    # -- form state

    def update(self, **changes) -> BookingRequest:
        unknown = set(changes) - FORM_FIELDS
        if unknown:
            raise ValueError(f"Unknown form fields: {sorted(unknown)}")
        if "date" in changes:
            return self.select_date(changes.pop("date"), **changes)
        self.request = self.request.with_changes(**changes)
        return self.request

    def select_date(self, day, **changes) -> BookingRequest:
        day = parse_date(day)
        self.request = self.request.with_changes(date=day, **changes)
        self.occupied = frozenset()
        self.day_fully_booked = False
        if day is None:
            return self.request

        try:
            response = self._send("GET", "/reservas-por-fecha", params={"date": day.isoformat()})
        except NetworkError:
            logger.warning("Could not fetch occupied slots for %s", day)
            return self.request

        # stale: the form was closed or another day was picked meanwhile
        if self._closed or self.request.date != day:
            return self.request
        if response.status_code != 200:
            logger.warning("Occupied slots for %s failed with HTTP %s", day, response.status_code)
            return self.request

        self.occupied = frozenset(response.json().get("horasOcupadas", []))
        self.day_fully_booked = len(self.occupied) >= len(TIME_SLOTS)
        if self.day_fully_booked:
            self.fully_booked_dates.add(day)
        return self.request

    def reset(self) -> None:
        self.request = BookingRequest()
        self.errors = {}
        self.occupied = frozenset()
        self.day_fully_booked = False

    # -- what the screen renders

    def time_options(self) -> list[tuple[str, bool]]:
        """Every slot paired with whether it is disabled."""
        return [(slot, slot in self.occupied) for slot in TIME_SLOTS]

    def is_closed_day(self, day: Date) -> bool:
        return self.closed_weekday is not None and day.weekday() == self.closed_weekday

    def is_fully_booked(self, day: Date) -> bool:
        return day in self.fully_booked_dates

    def is_selectable(self, day: Date) -> bool:
        return day >= self._today() and not self.is_closed_day(day) and not self.is_fully_booked(day)

    @property
    def can_select_time(self) -> bool:
        return not self.day_fully_booked

    @property
    def can_submit(self) -> bool:
        return not self.is_submitting and not self.day_fully_booked

    @property
    def success_message(self) -> str:
        if self._success_shown_at is None:
            return ""
        if self._clock() - self._success_shown_at >= self.success_notice_seconds:
            self._success_message = ""
            self._success_shown_at = None
        return self._success_message

    # -- actions

    def validate(self) -> bool:
        req = self.request
        self.errors = validate_fields(
            req.name,
            req.phone,
            req.date,
            req.time,
            req.service,
            today=self._today(),
            closed_weekday=self.closed_weekday,
        )
        return not self.errors

    def check_availability(self) -> bool:
        req = self.request
        if req.date is None or not req.time:
            self.form_error = MSG_SLOT_NOT_CHOSEN
            return False
        try:
            response = self._send(
                "GET", "/verificar", params={"date": req.date.isoformat(), "time": req.time}
            )
        except NetworkError:
            self.form_error = MSG_NETWORK
            return False

        if response.status_code != 200:
            self.form_error = MSG_AVAILABILITY_FAILED
            return False
        if response.json().get("reservado"):
            self.form_error = MSG_SLOT_TAKEN
            return False

        self.form_error = ""
        return True

    def submit(self) -> bool:
        """Validate, re-check the slot and book it. Returns True on success."""
        if self.is_submitting or self._closed or self.day_fully_booked:
            return False

        self._success_message = ""
        self._success_shown_at = None
        if not self.validate():
            return False

        self.is_submitting = True
        try:
            if not self.check_availability():
                return False

            try:
                response = self._send("POST", "/reservar", json=self.request.to_payload())
            except NetworkError:
                self.form_error = MSG_NETWORK
                return False

            if self._closed:
                return False
            if response.status_code != 200:
                self.form_error = _error_message(response, MSG_BOOKING_FAILED)
                if response.status_code == 422:
                    self.errors = dict(response.json().get("fields", {}))
                return False

            self._success_message = response.json().get("message", "Appointment booked")
            self._success_shown_at = self._clock()
            self.form_error = ""
            self.reset()
            return True
        finally:
            self.is_submitting = False

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return self.http.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise NetworkError(str(e)) from e
