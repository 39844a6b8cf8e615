import os
import tempfile

# Configure before any project import reads config
_TMP = tempfile.mkdtemp(prefix="tripvault-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'app.db')}"
os.environ["LOG_PATH"] = os.path.join(_TMP, "api.log")
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ.pop("STORAGE_BUCKET", None)
os.environ.pop("OPENAI_API_KEY", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base, get_db
from main import app
from services.storage_service import LocalStorage, get_storage


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "uploads")


@pytest.fixture
def client(session_factory, storage):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def trip(db):
    from services.trip_service import create_trip
    return create_trip(db, "Paris long weekend")


@pytest.fixture
def vault_item(db, trip):
    from services.vault_service import create_vault_item
    return create_vault_item(db, trip.id, "Louvre", "Morning at the museum", "Culture")
