import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clubhub.auth.otp import InMemoryOTPStore
from clubhub.auth.utils import create_access_token, get_password_hash
from clubhub.database import Base, get_db
from clubhub.main import app
from clubhub.models import Booking, BookingStatus, Club, Event, EventStatus, User, UserRole
from clubhub.tickets.codec import TicketCodec
from clubhub.tickets.policy import utcnow


class FakeClock:
    """Settable clock for time-dependent code"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


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
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.otp_store = InMemoryOTPStore()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def ticket_codec():
    return TicketCodec("ticket-test-secret")


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(role: UserRole = UserRole.USER, first_name: str = "Test") -> User:
        counter["n"] += 1
        user = User(
            first_name=first_name,
            last_name=f"User{counter['n']}",
            email=f"{role.value.lower()}{counter['n']}@example.com",
            password=get_password_hash("password123"),
            role=role.value,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def club_owner(make_user):
    return make_user(UserRole.CLUB, first_name="Club")


@pytest.fixture
def club(db_session, club_owner):
    club = Club(name="Chess Club", owner_id=club_owner.id)
    db_session.add(club)
    db_session.commit()
    db_session.refresh(club)
    return club


@pytest.fixture
def make_event(db_session, club):
    def _make_event(
        date: datetime = None,
        status: EventStatus = EventStatus.APPROVED,
        max_seats: int = 50,
        title: str = "Spring Tournament",
    ) -> Event:
        event = Event(
            club_id=club.id,
            title=title,
            venue="Main Hall",
            date=date or utcnow() + timedelta(hours=1),
            max_seats=max_seats,
            status=status.value,
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make_event


@pytest.fixture
def make_booking(db_session):
    def _make_booking(
        user: User,
        event: Event,
        status: BookingStatus = BookingStatus.CONFIRMED,
        ticket_token: str = None,
    ) -> Booking:
        booking = Booking(
            user_id=user.id,
            event_id=event.id,
            status=status.value,
            ticket_token=ticket_token,
        )
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = create_access_token(data={"sub": user.id, "role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
