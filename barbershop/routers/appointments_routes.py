# barbershop/routers/appointments_routes.py

from datetime import date as Date

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barbershop.availability import in_slot_order, is_fully_booked, is_slot_taken, occupied_slots
from barbershop.booking import book_appointment
from barbershop.config import Settings
from barbershop.data import SERVICES, TIME_SLOTS
from barbershop.db import get_session
from barbershop.deps import get_settings
from barbershop.schemas import (
    AppointmentCreate,
    BookingResponse,
    OccupiedSlots,
    ShopHours,
    SlotStatus,
)

router = APIRouter(
    tags=["appointments"],
)


@router.post("/reservar", response_model=BookingResponse)
def create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    db_appt = book_appointment(session, appt, closed_weekday=settings.closed_weekday)
    return {"message": "Appointment booked successfully!", "data": db_appt}


@router.get("/verificar", response_model=SlotStatus)
def check_slot(
    date: Date,
    time: str,
    session: Session = Depends(get_session),
):
    return {"reservado": is_slot_taken(session, date, time)}


@router.get("/reservas-por-fecha", response_model=OccupiedSlots)
def bookings_for_date(
    date: Date,
    session: Session = Depends(get_session),
):
    occupied = occupied_slots(session, date)
    return {
        "horasOcupadas": in_slot_order(occupied),
        "completo": is_fully_booked(occupied),
    }


@router.get("/horarios", response_model=ShopHours)
def shop_hours(settings: Settings = Depends(get_settings)):
    return {
        "horarios": TIME_SLOTS,
        "servicios": list(SERVICES),
        "diaCerrado": settings.closed_weekday,
    }
