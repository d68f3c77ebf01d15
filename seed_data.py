#!/usr/bin/env python3

from datetime import timedelta

from clubhub.auth.utils import get_password_hash
from clubhub.database import Base, SessionLocal, engine
from clubhub.models import Booking, Club, Event, EventStatus, User, UserRole
from clubhub.tickets.policy import utcnow

DEMO_PASSWORD = "password123"

def create_seed_data():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        print("🚀 Creating seed data for Club Events Portal...")

        # Clear existing data (in reverse dependency order)
        print("Clearing existing data...")
        db.query(Booking).delete()
        db.query(Event).delete()
        db.query(Club).delete()
        db.query(User).delete()

        # 1. Create Users
        print("Creating users...")
        password = get_password_hash(DEMO_PASSWORD)
        admin = User(first_name="Site", last_name="Admin", email="admin@clubhub.dev",
                     password=password, role=UserRole.ADMIN.value)
        organiser = User(first_name="Chess", last_name="Organiser", email="club@clubhub.dev",
                         password=password, role=UserRole.CLUB.value)
        member = User(first_name="Ada", last_name="Lovelace", email="member@clubhub.dev",
                      password=password, role=UserRole.USER.value)
        db.add_all([admin, organiser, member])
        db.flush()

        # 2. Create Club
        print("Creating club...")
        club = Club(name="Chess Club", description="Weekly games and tournaments", owner_id=organiser.id)
        db.add(club)
        db.flush()

        # 3. Create Events
        print("Creating events...")
        now = utcnow().replace(minute=0, second=0, microsecond=0)
        events = [
            # Inside the check-in window right away
            Event(club_id=club.id, title="Blitz Night", venue="Student Union, Room 2",
                  date=now + timedelta(hours=3), max_seats=40, status=EventStatus.APPROVED.value),
            Event(club_id=club.id, title="Spring Tournament", venue="Main Hall",
                  date=now + timedelta(days=14), max_seats=120, status=EventStatus.APPROVED.value),
            Event(club_id=club.id, title="Simultaneous Exhibition", venue="Library Atrium",
                  date=now + timedelta(days=30), max_seats=25, status=EventStatus.PENDING.value),
        ]
        db.add_all(events)

        db.commit()
        print("✅ Successfully created seed data for Club Events Portal!")
        print(f"Created:")
        print(f"  - 3 users (password: {DEMO_PASSWORD})")
        print(f"      admin:    {admin.email}")
        print(f"      club:     {organiser.email}")
        print(f"      member:   {member.email}")
        print(f"  - 1 club")
        print(f"  - {len(events)} events")

    except Exception as e:
        print(f"❌ Error creating seed data: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()
