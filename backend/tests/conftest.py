"""Pytest configuration and fixtures."""

import os

# Keep the app's own engine off the filesystem during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import Generator, List

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from clubops.core.security import get_password_hash, create_access_token
from clubops.db.base import Base
from clubops.db.session import get_db
from clubops.main import app
# Import all models to ensure they're registered with Base.metadata
from clubops.models import *
from clubops.models.club import Club, ClubRole, UserClubRole
from clubops.models.dancer import Dancer, DancerLicense
from clubops.models.queue import DjQueue, Stage
from clubops.models.user import User
from clubops.models.vip import VipRoom

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    # Disable rate limiters during tests to avoid flaky failures
    from clubops.core.rate_limit import limiter as global_limiter
    global_limiter.enabled = False
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    global_limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def test_club(db_session: Session) -> Club:
    """Create the club the test user works in."""
    club = Club(name="Elite Gentlemen's Club", city="Las Vegas", state="NV", is_active=True)
    db_session.add(club)
    db_session.commit()
    db_session.refresh(club)
    return club


@pytest.fixture
def other_club(db_session: Session) -> Club:
    """A club the test user is not a member of."""
    club = Club(name="Rival Club", is_active=True)
    db_session.add(club)
    db_session.commit()
    db_session.refresh(club)
    return club


@pytest.fixture
def test_user(db_session: Session, test_club: Club) -> User:
    """Create a test user with a MANAGER membership in ``test_club``."""
    user = User(
        email="test@example.com",
        password_hash=get_password_hash("testpass123"),
        first_name="Test",
        last_name="Manager",
        is_active=True,
    )
    user.club_roles.append(UserClubRole(club_id=test_club.id, role=ClubRole.MANAGER))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_token(test_user: User) -> str:
    """Get an authentication token for the test user."""
    return create_access_token(data={"sub": str(test_user.id), "email": test_user.email})


@pytest.fixture
def auth_headers(auth_token: str, test_club: Club) -> dict:
    """Bearer token plus the Club-ID header of ``test_club``."""
    return {"Authorization": f"Bearer {auth_token}", "Club-ID": str(test_club.id)}


@pytest.fixture
def test_dancers(db_session: Session, test_club: Club) -> List[Dancer]:
    """Three active dancers, each with a license valid for a year."""
    dancers = []
    for stage_name, first, last in (
        ("Aria", "Sarah", "Johnson"),
        ("Bella", "Emily", "Davis"),
        ("Crystal", "Jessica", "Wilson"),
    ):
        dancer = Dancer(club_id=test_club.id, stage_name=stage_name, first_name=first, last_name=last)
        dancer.licenses.append(DancerLicense(
            license_type="ENTERTAINMENT",
            license_number=f"ENT-{stage_name.upper()}",
            issue_date=date.today() - timedelta(days=30),
            expiration_date=date.today() + timedelta(days=365),
        ))
        dancers.append(dancer)
    db_session.add_all(dancers)
    db_session.commit()
    for dancer in dancers:
        db_session.refresh(dancer)
    return dancers


@pytest.fixture
def test_stage(db_session: Session, test_club: Club) -> Stage:
    """Create a stage with its (empty) DJ queue."""
    stage = Stage(club_id=test_club.id, name="Main Stage", max_capacity=1)
    db_session.add(stage)
    db_session.flush()
    db_session.add(DjQueue(club_id=test_club.id, stage_id=stage.id, name="Main Stage Queue"))
    db_session.commit()
    db_session.refresh(stage)
    return stage


@pytest.fixture
def test_queue(db_session: Session, test_stage: Stage) -> DjQueue:
    return db_session.query(DjQueue).filter(DjQueue.stage_id == test_stage.id).one()


@pytest.fixture
def test_room(db_session: Session, test_club: Club) -> VipRoom:
    """A VIP room billed at 150 per hour."""
    room = VipRoom(
        club_id=test_club.id,
        name="VIP Suite 1",
        description="Luxury private suite",
        hourly_rate=Decimal("150.00"),
        capacity=4,
        amenities=["Private bar", "Sound system"],
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room
