import os

os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import portal.models  # noqa: F401,E402
from portal.core.database import Base, get_db  # noqa: E402
from portal.core.errors import register_error_handlers  # noqa: E402
from portal.routers.admin_submissions import router as admin_submissions_router  # noqa: E402
from portal.routers.auth import router as auth_router  # noqa: E402
from portal.routers.submissions import router as submissions_router  # noqa: E402
from portal.services import event_handlers, notifications  # noqa: E402
from tests.fake_channels import RecordingChannel  # noqa: E402


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    yield testing_session_local
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def channel(monkeypatch):
    recording = RecordingChannel()
    monkeypatch.setattr(notifications, "get_notification_channel", lambda: recording)
    return recording


@pytest.fixture()
def client(session_factory, channel, monkeypatch):
    monkeypatch.setattr(event_handlers, "SessionLocal", session_factory)

    app = FastAPI()
    register_error_handlers(app)
    app.include_router(submissions_router)
    app.include_router(admin_submissions_router)
    app.include_router(auth_router)

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    return TestClient(app)
