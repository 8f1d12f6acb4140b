"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from friends_trip.api.main import create_app
from friends_trip.config import Settings
from friends_trip.infrastructure.database.models import Base
from friends_trip.infrastructure.database.session import get_db
from friends_trip.services.engine import SettlementEngine


# Test database: one shared in-memory connection
TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def settlement_engine(db: Session) -> SettlementEngine:
    return SettlementEngine(db)


def _client_for(db: Session, app_settings: Settings) -> TestClient:
    app = create_app(app_settings)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    return _client_for(db, Settings(database_url=TEST_DATABASE_URL))


@pytest.fixture
def restrict_client(db: Session) -> TestClient:
    """Test client whose bills cannot be deleted while they hold expenses"""
    return _client_for(db, Settings(database_url=TEST_DATABASE_URL, bill_delete_policy="restrict"))


@pytest.fixture
def dinner_bill(client: TestClient) -> dict:
    """Bill "Dinner" shared by A, B and C"""
    response = client.post("/v1/bills", json={"name": "Dinner", "participants": ["A", "B", "C"]})
    assert response.status_code == 201
    return response.json()
