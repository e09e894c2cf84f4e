"""
Database configuration and session management for the SQL snapshot backend.

This module sets up the database connection using SQLAlchemy and provides
a session factory for the key-value snapshot table.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DATABASE_URL

Base = declarative_base()


def make_engine(url: str = DATABASE_URL):
    """
    Create a SQLAlchemy engine for ``url``.

    SQLite connections are shared with the FastAPI worker threads, so the
    same-thread check is disabled for them.
    """
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


def make_session_factory(engine):
    """Create the tables if needed and return a session factory bound to ``engine``."""
    # Imported for its side effect of registering the table on Base
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
