# barbershop/booking.py

import logging
from datetime import date as Date
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from .availability import is_slot_taken
from .data import CLOSED_WEEKDAY
from .errors import ConflictError, InvalidBookingError, WriteError
from .models import Appointment
from .schemas import AppointmentCreate
from .validation import check_date

logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "An appointment is already booked for this date and time"


def book_appointment(
    session: Session,
    appt: AppointmentCreate,
    today: Optional[Date] = None,
    closed_weekday: Optional[int] = CLOSED_WEEKDAY,
) -> Appointment:
    """Book a single slot.

    Field shapes are already checked by ``AppointmentCreate``; the date rules
    depend on the current day and the shop's closed weekday, so they run here.

    Raises ``InvalidBookingError`` for a past or closed date, ``ConflictError``
    when the slot is taken, ``QueryError`` if the availability lookup fails and
    ``WriteError`` if the insert fails for any reason other than the slot
    being taken.
    """
    # 1) Validate the date against today and the closed weekday
    message = check_date(appt.date, today=today, closed_weekday=closed_weekday)
    if message:
        raise InvalidBookingError(message, fields={"date": message})

    # 2) Reject slots that are already booked
    if is_slot_taken(session, appt.date, appt.time):
        logger.info("Slot %s %s already booked", appt.date, appt.time)
        raise ConflictError(SLOT_TAKEN_MESSAGE)

    # 3) Create and save appointment
    db_appt = Appointment(
        name=appt.name,
        phone=appt.phone,
        date=appt.date,
        time=appt.time,
        service=appt.service,
    )

    session.add(db_appt)
    try:
        session.commit()
    except IntegrityError:
        # uq_appointment_slot: a concurrent request booked it after our check
        session.rollback()
        logger.info("Slot %s %s taken by a concurrent booking", appt.date, appt.time)
        raise ConflictError(SLOT_TAKEN_MESSAGE)
    except SQLAlchemyError as e:
        session.rollback()
        detail = str(getattr(e, "orig", None) or e)
        logger.error("Failed to save appointment for %s %s: %s", appt.date, appt.time, detail)
        raise WriteError(detail) from e

    session.refresh(db_appt)  # fills db_appt.id
    logger.info("Booked %s %s (%s) for %s", db_appt.date, db_appt.time, db_appt.service, db_appt.name)
    return db_appt
