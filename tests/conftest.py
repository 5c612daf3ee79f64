import os
import tempfile

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory so the default database never touches the working tree
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_saloons.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["MAX_VALUE_SIZE"] = "65536"
os.environ["LOG_LEVEL"] = "DEBUG"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from saloon_directory.api.deps import get_saloon_service
from saloon_directory.core.config import settings
from saloon_directory.db.base import build_engine, init_db
from saloon_directory.main import app
from saloon_directory.schemas.saloon import SaloonPayload
from saloon_directory.services.saloon import build_saloon_service


class FakeClock:
    """Deterministic clock: every call returns the next tick."""

    def __init__(self, start: int = 1_000):
        self.current = start

    def now(self) -> int:
        self.current += 1
        return self.current


@pytest.fixture(scope="function")
def db_path(tmp_path):
    """Path of a fresh SQLite database file for one test."""
    return tmp_path / "saloons.db"


@pytest.fixture(scope="function")
def engine(db_path):
    test_engine = build_engine(f"sqlite:///{db_path}")
    init_db(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def clock():
    return FakeClock()


@pytest.fixture(scope="function")
def saloon_service(engine, clock):
    return build_saloon_service(
        engine, max_value_size=settings.max_value_size, clock=clock
    )


@pytest.fixture(scope="function")
def client(saloon_service):
    """Create a test client with the saloon service dependency overridden."""
    app.dependency_overrides[get_saloon_service] = lambda: saloon_service

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def owned_saloon(saloon_service):
    """A saloon owned by principal "u1"."""
    return saloon_service.create_saloon(
        "u1",
        SaloonPayload(name="Joe's", location="NYC", saloon_url="http://a"),
    )
