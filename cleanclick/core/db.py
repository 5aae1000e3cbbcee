from functools import lru_cache
from pathlib import Path

from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, create_engine

from cleanclick import booking_models  # noqa: F401  registers the tables
from cleanclick.core.config import settings
from cleanclick.core.logging import logger


def make_engine(url: str) -> Engine:
    """Create an engine, making room for a local sqlite file if needed."""
    parsed = make_url(url)
    connect_args = {}
    if parsed.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args=connect_args)


@lru_cache()
def get_engine() -> Engine:
    return make_engine(settings.DATABASE_URL)


def init_db(engine: Engine) -> None:
    """
    Create the ``cleaners`` and ``bookings`` tables and their indexes.

    Pointing DATABASE_URL at the Supabase Postgres instance provisions the
    hosted schema, including the partial unique index that makes booking
    inserts race-safe.
    """
    SQLModel.metadata.create_all(engine)
    logger.info({
        "event_type": "storage",
        "event_name": "schema_ready",
        "backend": engine.dialect.name,
    })
