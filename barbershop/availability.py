# barbershop/availability.py

import logging
from datetime import date as Date
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .data import TIME_SLOTS
from .errors import QueryError
from .models import Appointment

logger = logging.getLogger(__name__)


def is_slot_taken(session: Session, on_date: Date, time: str) -> bool:
    try:
        existing = session.exec(
            select(Appointment.id)
            .where(Appointment.date == on_date)
            .where(Appointment.time == time)
            .limit(1)
        ).first()
    except SQLAlchemyError as e:
        logger.error("Availability query failed for %s %s: %s", on_date, time, e)
        raise QueryError("Could not check slot availability") from e

    return existing is not None


def occupied_slots(session: Session, on_date: Date) -> set[str]:
    try:
        times = session.exec(
            select(Appointment.time).where(Appointment.date == on_date)
        ).all()
    except SQLAlchemyError as e:
        logger.error("Occupied slots query failed for %s: %s", on_date, e)
        raise QueryError("Could not fetch bookings for that date") from e

    return set(times)


def is_fully_booked(occupied: Iterable[str]) -> bool:
    return set(TIME_SLOTS).issubset(occupied)


def in_slot_order(times: Iterable[str]) -> list[str]:
    # unknown times (legacy rows) go last
    order = {slot: i for i, slot in enumerate(TIME_SLOTS)}
    return sorted(times, key=lambda t: (order.get(t, len(order)), t))
