# barbershop/schemas.py

from datetime import datetime, date as Date
from typing import List, Optional

from pydantic import BaseModel, field_validator

from .validation import check_name, check_phone, check_time, check_service


class AppointmentCreate(BaseModel):
    name: str
    phone: str
    date: Date
    time: str
    service: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        message = check_name(value)
        if message:
            raise ValueError(message)
        return value.strip()

    @field_validator("phone")
    @classmethod
    def phone_digits(cls, value: str) -> str:
        message = check_phone(value)
        if message:
            raise ValueError(message)
        return value

    @field_validator("time")
    @classmethod
    def time_in_slots(cls, value: str) -> str:
        message = check_time(value)
        if message:
            raise ValueError(message)
        return value

    @field_validator("service")
    @classmethod
    def service_available(cls, value: str) -> str:
        message = check_service(value)
        if message:
            raise ValueError(message)
        return value


class AppointmentPublic(BaseModel):
    id: int
    name: str
    phone: str
    date: Date
    time: str
    service: str
    created_at: datetime


class BookingResponse(BaseModel):
    message: str
    data: AppointmentPublic


class SlotStatus(BaseModel):
    reservado: bool


class OccupiedSlots(BaseModel):
    horasOcupadas: List[str]
    completo: bool


class ShopHours(BaseModel):
    horarios: List[str]
    servicios: List[str]
    diaCerrado: Optional[int]
