# barbershop/models.py

from typing import Optional
from datetime import datetime, timezone, date as Date

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    __table_args__ = (
        UniqueConstraint("date", "time", name="uq_appointment_slot"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    name: str
    phone: str
    date: Date = Field(index=True)
    time: str  # "HH:MM", one of TIME_SLOTS
    service: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
