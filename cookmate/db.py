from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings


def _unicode_lower(value):
    if isinstance(value, str):
        return value.lower()
    return value


def install_sqlite_lower(engine):
    """Replace SQLite's ASCII-only ``lower()`` with Python's ``str.lower``.

    Case-insensitive filters built with ``icontains`` then fold case the
    same way the ranker does. Must be installed before the first connect.
    """
    @event.listens_for(engine, "connect")
    def _register_lower(dbapi_conn, connection_record):
        dbapi_conn.create_function("lower", 1, _unicode_lower,
                                   deterministic=True)

    return engine


connect_args = {}
if settings.db.url.startswith("sqlite"):
    # FastAPI may use the session from a different thread than the one
    # that created it
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.db.url, connect_args=connect_args)
if engine.dialect.name == "sqlite":
    install_sqlite_lower(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    # Import models so they register on Base.metadata before create_all
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
