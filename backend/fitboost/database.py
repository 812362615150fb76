"""SQLAlchemy engine and session factory for the SQLite storage backend.

Storage access is synchronous, so this uses the plain ``sqlite`` driver
rather than an async engine. Import ``db_models`` before calling
``create_tables()`` so that every ORM model is registered with
``Base.metadata``.
"""

from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

DATABASE_FILENAME = "fitboost.db"


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""

    pass


def make_engine(data_dir: Path) -> Engine:
    """Create an engine for the SQLite file inside *data_dir*.

    Args:
        data_dir: Directory holding the database file. Created if missing.

    Returns:
        A SQLAlchemy ``Engine``.
    """
    data_dir.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{data_dir / DATABASE_FILENAME}", echo=False)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to *engine*."""
    return sessionmaker(engine, expire_on_commit=False)


def create_tables(engine: Engine) -> None:
    """Create all database tables that do not yet exist."""
    Base.metadata.create_all(engine)
