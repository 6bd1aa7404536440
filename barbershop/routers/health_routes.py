# barbershop/routers/health_routes.py

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from barbershop.db import get_session
from barbershop.errors import QueryError
from barbershop.models import Appointment
from barbershop.schemas import AppointmentPublic

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["health"],
)


@router.get("/", response_class=PlainTextResponse)
def root():
    return "Barbershop server running"


@router.get("/test")
def database_check(session: Session = Depends(get_session)):
    try:
        sample = session.exec(select(Appointment).limit(1)).all()
    except SQLAlchemyError as e:
        detail = str(getattr(e, "orig", None) or e)
        logger.error("Database connection check failed: %s", detail)
        raise QueryError(detail) from e

    return {
        "message": "Database connection OK",
        "data": [AppointmentPublic.model_validate(a, from_attributes=True) for a in sample],
    }
