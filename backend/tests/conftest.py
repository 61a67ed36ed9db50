"""Shared test fixtures for all test modules."""

import contextlib

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from usage_ledger.core.database import Base, Database
from usage_ledger.main import create_app
from usage_ledger.models.customer import Customer

# In-memory SQLite engine with StaticPool so all sessions share the same
# database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
test_database = Database(engine=_test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and delete all rows after."""
    Base.metadata.create_all(bind=_test_engine)
    yield
    # Child tables first, so foreign keys stay enforced throughout.
    with _test_engine.connect() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.commit()


@pytest.fixture
def app():
    return create_app(test_database)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def session_factory():
    return test_database.SessionLocal


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = test_database.session()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def customer(db_session):
    customer = Customer(name="Alice")
    db_session.add(customer)
    db_session.commit()
    db_session.refresh(customer)
    return customer


@pytest.fixture
def app_handler(client):
    """httpx handler that sends requests to the in-process app."""

    def handler(request: httpx.Request) -> httpx.Response:
        response = client.request(
            request.method,
            request.url.path,
            content=request.content,
            headers={"Content-Type": "application/json"},
        )
        return httpx.Response(
            response.status_code, content=response.content, headers=response.headers
        )

    return handler
