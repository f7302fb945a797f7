"""
Database configuration and session management for SQLAlchemy.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings

# Declarative Base
Base = declarative_base()


def create_session_factory(settings: Settings) -> Tuple[Engine, sessionmaker]:
    """
    Builds the engine and session factory for the configured store.

    In-memory SQLite databases share a single connection so that every
    session sees the same tables.
    """
    url = settings.DATABASE_URL
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(url, **kwargs)
    factory = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )
    return engine, factory


def init_models(engine: Engine) -> None:
    # Import all models to register them with the Base metadata
    import app.auth.models  # noqa: F401
    import app.goals.models  # noqa: F401
    import app.progress.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


# Dependency for FastAPI Routes
def get_db(request: Request):
    """
    Yields a database session for use in FastAPI dependency injection.
    Ensures the session is closed after the request lifecycle.
    """
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalises timestamps to UTC; naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
