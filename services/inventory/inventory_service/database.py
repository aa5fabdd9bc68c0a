"""
Database configuration and session management for the Inventory service.

This module sets up the SQLAlchemy engine for the relational backend and
provides a session factory for database operations.
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker

# Base class for declarative models
Base = declarative_base()


def create_session_factory(database_url: str = None, engine: Engine = None) -> sessionmaker:
    """
    Build a session factory bound to the given engine or database URL.

    The inventory table is created if it does not exist yet. Existing
    tables are left untouched.

    Args:
        database_url: SQLAlchemy database URL, used when no engine is given
        engine: Pre-built engine (tests pass an in-memory SQLite engine)

    Returns:
        sessionmaker: Factory producing SQLAlchemy sessions
    """
    if engine is None:
        engine = create_engine(database_url)

    # Register the models on Base before creating tables
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=engine)

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
