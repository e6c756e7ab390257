import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import sessionmaker

from fakes import InMemoryRepository
from tourdir.core.config import Settings
from tourdir.core.database import Base, get_db
from tourdir.core.directory import DirectoryService
from tourdir.core.itinerary import ItineraryManager
from tourdir.main import create_app
from tourdir.models.domain import (
    CategoryCreate,
    ItineraryCreate,
    UserCreate,
)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now=datetime.datetime(2025, 5, 1, 8, 0, 0)):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += datetime.timedelta(**kwargs)


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def directory(repo):
    return DirectoryService(repo)


@pytest.fixture
def planner(repo, clock):
    return ItineraryManager(repo, clock=clock)


@pytest.fixture
def user(directory):
    return directory.create_user(
        UserCreate(username="tendai", email="tendai@example.com", password="secret123")
    )


@pytest.fixture
def category(directory):
    return directory.create_category(CategoryCreate(name="Dining", icon="utensils"))


@pytest.fixture
def itinerary(planner, user):
    return planner.create_itinerary(
        ItineraryCreate(
            user_id=user.id,
            title="Falls Trip",
            start_date=datetime.date(2025, 5, 1),
            end_date=datetime.date(2025, 5, 5),
            total_budget=1000,
        )
    )


# --- HTTP fixtures --------------------------------------------------------

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def client():
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app = create_app(
        Settings(database_url=SQLALCHEMY_DATABASE_URL, log_file="", maps_api_key="test-key")
    )
    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app, raise_server_exceptions=False)

    Base.metadata.drop_all(bind=engine)
    engine.dispose()
