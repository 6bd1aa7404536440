from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import SQLModel, Session, create_engine, select

from barbershop import booking
from barbershop.availability import in_slot_order, is_fully_booked, is_slot_taken, occupied_slots
from barbershop.booking import book_appointment
from barbershop.data import TIME_SLOTS
from barbershop.errors import ConflictError, InvalidBookingError, QueryError, WriteError
from barbershop.models import Appointment
from barbershop.schemas import AppointmentCreate


class BrokenSession:
    def exec(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))


def make_request(day: date, time: str = "10:00", name: str = "Ana") -> AppointmentCreate:
    return AppointmentCreate(name=name, phone="1122334455", date=day, time=time, service="Corte")


def test_slot_is_free_until_booked(session, open_day) -> None:
    day = open_day()
    assert is_slot_taken(session, day, "10:00") is False

    book_appointment(session, make_request(day))

    assert is_slot_taken(session, day, "10:00") is True
    assert is_slot_taken(session, day, "10:30") is False
    assert is_slot_taken(session, day + timedelta(days=1), "10:00") is False


def test_occupied_slots_for_a_date(session, open_day) -> None:
    day = open_day()
    assert occupied_slots(session, day) == set()

    book_appointment(session, make_request(day, "14:30"))
    book_appointment(session, make_request(day, "10:00"))
    book_appointment(session, make_request(open_day(2), "11:00"))

    assert occupied_slots(session, day) == {"10:00", "14:30"}


def test_in_slot_order_sorts_by_the_day_grid() -> None:
    assert in_slot_order({"14:30", "09:30", "10:00"}) == ["09:30", "10:00", "14:30"]


def test_is_fully_booked_needs_every_slot() -> None:
    assert is_fully_booked(TIME_SLOTS)
    assert not is_fully_booked(TIME_SLOTS[:-1])
    assert not is_fully_booked(set())


def test_book_appointment_returns_the_stored_record(session, open_day) -> None:
    day = open_day()
    appt = book_appointment(session, make_request(day))

    assert appt.id is not None
    assert appt.name == "Ana"
    assert appt.date == day
    assert appt.time == "10:00"
    assert appt.created_at is not None


def test_second_booking_for_same_slot_conflicts(session, open_day) -> None:
    day = open_day()
    book_appointment(session, make_request(day))

    with pytest.raises(ConflictError):
        book_appointment(session, make_request(day, name="Luis"))

    assert len(session.exec(select(Appointment)).all()) == 1


def test_past_date_is_rejected(session) -> None:
    yesterday = date.today() - timedelta(days=1)

    with pytest.raises(InvalidBookingError) as excinfo:
        book_appointment(session, make_request(yesterday), closed_weekday=None)

    assert "date" in excinfo.value.fields


def test_closed_weekday_is_rejected(session, closed_day) -> None:
    with pytest.raises(InvalidBookingError):
        book_appointment(session, make_request(closed_day), closed_weekday=2)

    appt = book_appointment(session, make_request(closed_day), closed_weekday=None)
    assert appt.date == closed_day


def test_query_failure_surfaces_as_query_error(open_day) -> None:
    with pytest.raises(QueryError):
        is_slot_taken(BrokenSession(), open_day(), "10:00")
    with pytest.raises(QueryError):
        occupied_slots(BrokenSession(), open_day())
    with pytest.raises(QueryError):
        book_appointment(BrokenSession(), make_request(open_day()))


def test_write_failure_passes_store_message_through(session, open_day, monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)

    with pytest.raises(WriteError, match="disk I/O error"):
        book_appointment(session, make_request(open_day()))


def test_unique_constraint_catches_a_booking_the_check_missed(session, open_day, monkeypatch: pytest.MonkeyPatch) -> None:
    day = open_day()
    session.add(Appointment(name="Luis", phone="1199887766", date=day, time="10:00", service="Afeitado"))
    session.commit()

    # the availability check ran before the competing insert landed
    monkeypatch.setattr(booking, "is_slot_taken", lambda *args: False)

    with pytest.raises(ConflictError):
        book_appointment(session, make_request(day))

    names = session.exec(select(Appointment.name).where(Appointment.date == day)).all()
    assert names == ["Luis"]


def test_interleaved_bookings_from_two_sessions_never_double_book(tmp_path, open_day, monkeypatch: pytest.MonkeyPatch) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}")
    SQLModel.metadata.create_all(engine)
    day = open_day()
    real_check = booking.is_slot_taken

    def check_then_lose_the_race(session, on_date, time):
        free = real_check(session, on_date, time)
        # another request books the same slot between our check and our insert
        with Session(engine) as other:
            other.add(Appointment(name="Luis", phone="1199887766", date=on_date, time=time, service="Corte"))
            other.commit()
        return free

    monkeypatch.setattr(booking, "is_slot_taken", check_then_lose_the_race)

    with Session(engine) as session:
        with pytest.raises(ConflictError):
            book_appointment(session, make_request(day))

    with Session(engine) as session:
        rows = session.exec(select(Appointment).where(Appointment.date == day)).all()
    assert [(a.name, a.time) for a in rows] == [("Luis", "10:00")]
    engine.dispose()


def test_created_at_defaults_to_an_aware_utc_timestamp(session, open_day) -> None:
    unsaved = Appointment(name="Ana", phone="1122334455", date=open_day(), time="10:00", service="Corte")
    assert unsaved.created_at.tzinfo is not None
    assert unsaved.created_at.utcoffset() == timedelta(0)

    appt = book_appointment(session, make_request(open_day(), "11:00"))
    assert appt.id is not None
