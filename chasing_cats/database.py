"""Database engine, session factory and the FastAPI session dependency."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from chasing_cats.config import get_settings

settings = get_settings()


def _engine_options(database_url: str) -> dict[str, Any]:
    # SQLite (local runs and tests) has no server-side pool to size
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Yield a session for one request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create any missing tables. Migrations remain the source of truth in production."""
    # Models must be imported so their tables are registered on Base.metadata
    from chasing_cats import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
