# barbershop/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import create_db_and_tables
from .deps import get_settings
from .errors import BookingError, InvalidBookingError
from .routers import appointments_routes, health_routes

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("Database ready")
    yield


app = FastAPI(title="Barbershop Booking API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidBookingError)
async def invalid_booking(request: Request, exc: InvalidBookingError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "fields": exc.fields})


@app.exception_handler(BookingError)
async def booking_error(request: Request, exc: BookingError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def _field_name(loc) -> str:
    # ("body", "phone") -> "phone"; ("query", "date") -> "date"
    parts = [str(p) for p in loc if p not in ("body", "query")]
    return ".".join(parts) or "body"


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    fields = {}
    for err in exc.errors():
        field = _field_name(err.get("loc", ()))
        message = err.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        fields.setdefault(field, message.removeprefix("Value error, "))
    return JSONResponse(status_code=422, content={"error": "Invalid input", "fields": fields})


app.include_router(health_routes.router)
app.include_router(appointments_routes.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
