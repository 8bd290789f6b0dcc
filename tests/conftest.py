"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from typing import Dict, Generator
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from jodjod_api.api.main import create_app
from jodjod_api.api.dependencies import get_now, get_slip_reader
from jodjod_api.infrastructure.clients.slip_reader import SlipReader
from jodjod_api.infrastructure.database.models import Base
from jodjod_api.infrastructure.database.repositories import UserRepository
from jodjod_api.infrastructure.database.session import get_db
from jodjod_api.infrastructure.security.passwords import hash_password
from jodjod_api.infrastructure.security.tokens import issue_access_token


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed clock for period queries and slip object keys
FIXED_NOW = datetime(2024, 1, 10, 12, 0, 0)


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
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def textract_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def slip_reader(s3_client: MagicMock, textract_client: MagicMock) -> SlipReader:
    return SlipReader(s3_client=s3_client, textract_client=textract_client, bucket="test-bucket")


@pytest.fixture
def client(db: Session, slip_reader: SlipReader) -> TestClient:
    """Create FastAPI test client with test database, fixed clock, and mocked AWS"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: FIXED_NOW
    app.dependency_overrides[get_slip_reader] = lambda: slip_reader
    return TestClient(app)


@pytest.fixture
def spender(db: Session):
    """Persisted user owning test transactions"""
    user = UserRepository(db).create_user(
        firstname="Somchai",
        lastname="Jaidee",
        email="somchai@example.com",
        username="somchai",
        password_hash=hash_password("s3cret"),
    )
    db.commit()
    return user


@pytest.fixture
def auth_headers(spender) -> Dict[str, str]:
    return {"Authorization": f"Bearer {issue_access_token(spender.id)}"}
