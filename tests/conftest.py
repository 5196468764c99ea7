"""Pytest fixtures shared by the decoder, reconciler and API tests.

The audit table lives in an in-memory SQLite database, recreated for every
test that asks for ``db_session``.
"""

from __future__ import annotations

import os

# Must be set before getnet_recon is imported: settings and the app engine
# are built at import time.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from getnet_recon.core.database import Base, get_db
from getnet_recon.main import app

# One shared connection, so every session sees the same in-memory database
audit_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
AuditSession = sessionmaker(autocommit=False, autoflush=False, bind=audit_engine)


@pytest.fixture
def db_session():
    """Session bound to a freshly created audit schema."""
    Base.metadata.create_all(bind=audit_engine)
    session = AuditSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=audit_engine)


@pytest.fixture
def client(db_session):
    """TestClient whose requests use ``db_session`` instead of the app engine."""
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_db, None)
