"""Helpers for tests: isolated in-memory SQLite stores and a TestClient bound to them."""

from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from warden.core.database import build_engine, get_db
from warden.main import app
from warden.models import Base

STRONG_PASSWORD = "Sup3r$ecret"
OTHER_STRONG_PASSWORD = "An0ther#Pass"


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with the schema created. One per test for isolation."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_client(session_factory: sessionmaker, **kwargs: object) -> TestClient:
    """TestClient for the real app with get_db pointed at session_factory."""

    def override_get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app, **kwargs)


def reset_overrides() -> None:
    app.dependency_overrides.clear()
