# barbershop/db.py

from typing import Generator

from sqlmodel import SQLModel, create_engine, Session

from .deps import get_settings
from . import models  # noqa: F401  registers the tables on SQLModel.metadata


def build_engine(database_url: str):
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # required for SQLite + FastAPI
    return create_engine(
        database_url,
        echo=False,          # set to True to see SQL
        connect_args=connect_args,
    )


engine = build_engine(get_settings().database_url)


def create_db_and_tables(bind=None):
    SQLModel.metadata.create_all(bind or engine)


# Dependency: one session per request
def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
