import os

# must be set before journeyapi.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATA_BACKEND", "fixture")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from journeyapi.config import Settings
from journeyapi.models import Base, User
from journeyapi.providers.vendor_catalog import FixtureVendorCatalog
from journeyapi.schemas.route import Coordinates

@pytest.fixture
def settings():
    return Settings(_env_file=None, DATABASE_URL="sqlite://", DATA_BACKEND="fixture")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def catalog():
    return FixtureVendorCatalog()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(points: int = 0) -> User:
        counter["n"] += 1
        user = User(device_id=f"test-device-{counter['n']:04d}", points=points, is_active=True)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def downtown():
    """Downtown Anchorage, a few hundred feet from vendor v1"""
    return Coordinates(latitude=61.2181, longitude=-149.9003)
