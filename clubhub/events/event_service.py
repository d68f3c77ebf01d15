import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from clubhub.models import Booking, BookingStatus, Club, Event, EventStatus, UserRole
from clubhub.events.schemas import ClubCreate, EventCreate, Event as EventSchema

logger = logging.getLogger(__name__)

def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

class EventService:
    """Clubs and their events"""

    def __init__(self, db: Session):
        self.db = db

    def create_club(self, club_data: ClubCreate, owner) -> Club:
        club = Club(name=club_data.name, description=club_data.description, owner_id=owner.id)
        self.db.add(club)
        self.db.commit()
        self.db.refresh(club)
        return club

    def create_event(self, event_data: EventCreate, acting_user) -> Event:
        club = self.db.query(Club).filter(Club.id == event_data.club_id).first()
        if not club:
            raise LookupError("Club not found")
        if acting_user.role != UserRole.ADMIN.value and club.owner_id != acting_user.id:
            raise PermissionError("Only the club owner can create events for this club")

        event = Event(
            club_id=club.id,
            title=event_data.title,
            description=event_data.description,
            venue=event_data.venue,
            date=to_naive_utc(event_data.date),
            max_seats=event_data.max_seats,
            status=EventStatus.PENDING.value,
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)

        logger.info("Event %s created for club %s", event.id, club.id)
        return event

    def set_status(self, event_id: str, new_status: EventStatus) -> Event:
        event = self.get_event(event_id)
        if not event:
            raise LookupError("Event not found")
        event.status = new_status.value
        self.db.commit()
        self.db.refresh(event)
        return event

    def get_event(self, event_id: str) -> Optional[Event]:
        return (
            self.db.query(Event)
            .options(joinedload(Event.club))
            .filter(Event.id == event_id)
            .first()
        )

    def list_events(self, status: Optional[EventStatus] = EventStatus.APPROVED) -> List[Event]:
        query = self.db.query(Event).options(joinedload(Event.club))
        if status:
            query = query.filter(Event.status == status.value)
        return query.order_by(Event.date).all()

    def seats_booked(self, event_id: str) -> int:
        return (
            self.db.query(func.count(Booking.id))
            .filter(Booking.event_id == event_id, Booking.status != BookingStatus.CANCELLED.value)
            .scalar()
        )

    def to_schema(self, event: Event) -> EventSchema:
        summary = EventSchema.model_validate(event)
        summary.seats_booked = self.seats_booked(event.id)
        summary.club_name = event.club.name if event.club else None
        return summary
