import pytest
from fastapi.testclient import TestClient
from analytics_ingest.config import Settings
from analytics_ingest.db.database import Database
from analytics_ingest.main import create_app
from analytics_ingest.services.database_service import DatabaseService

TEST_API_KEY = "test-key-123"


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'analytics_test.db'}",
        API_KEY=TEST_API_KEY,
        LOG_JSON=False,
        PAYLOAD_LOG_MAX_SIZE=5,
    )


@pytest.fixture()
def app(settings):
    application = create_app(settings)
    # Tables must exist for clients that do not run the lifespan (httpx ASGITransport)
    application.state.database.create_all()
    yield application
    application.state.database.dispose()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def auth_headers():
    return {"X-API-Key": TEST_API_KEY}


@pytest.fixture()
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'store_test.db'}")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture()
def store(database):
    return DatabaseService(database)
