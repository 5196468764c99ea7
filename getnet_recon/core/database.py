"""Database connection and session management.

Only the ingestion audit trail lives in the database; decoded records are
returned to the caller and never stored.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from getnet_recon.core.config import settings

# SQLite connections are shared across FastAPI's worker threads
_connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)

engine = create_engine(settings.database_url, echo=False, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Declarative base for the audit models."""


def init_db() -> None:
    """Create the audit tables if they do not exist yet."""
    import getnet_recon.models  # noqa: F401  registers the mapped tables

    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency that provides a database session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
