import logging
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from clubhub.models import Booking, BookingStatus, Event, EventStatus
from clubhub.events.event_service import EventService
from clubhub.tickets.issuer import IssuedTicket
from clubhub.tickets.policy import utcnow
from clubhub.tickets.ticket_service import TicketService

logger = logging.getLogger(__name__)

class BookingService:
    """Booking lifecycle: reserve a seat, issue its ticket, cancel"""

    def __init__(self, db: Session, ticket_service: Optional[TicketService] = None):
        self.db = db
        self.ticket_service = ticket_service or TicketService(db)

    def book_event(self, event_id: str, user) -> Tuple[Booking, IssuedTicket]:
        """Create a confirmed booking and its ticket in one transaction.

        A booking is only committed once its ticket has been signed, so a
        signing failure leaves nothing behind.
        """
        event_service = EventService(self.db)
        event = event_service.get_event(event_id)

        if not event:
            raise LookupError("Event not found")
        if event.status != EventStatus.APPROVED.value:
            raise ValueError("Event is not available for booking")

        existing = self.db.query(Booking).filter(
            Booking.user_id == user.id, Booking.event_id == event_id
        ).first()
        if existing:
            raise ValueError("You have already booked this event")

        if event_service.seats_booked(event_id) >= event.max_seats:
            raise ValueError("No seats available")

        booking = Booking(user_id=user.id, event_id=event_id, status=BookingStatus.CONFIRMED.value)

        try:
            # Bookings for one event queue on its row until commit
            self.db.query(Event.id).filter(Event.id == event_id).with_for_update().first()
            self.db.add(booking)
            self.db.flush()

            # Recount inside the transaction so a concurrent booking for the last seat loses
            if event_service.seats_booked(event_id) > event.max_seats:
                raise ValueError("No seats available")

            ticket = self.ticket_service.issuer.issue(booking)
            booking.ticket_token = ticket.token
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValueError("You have already booked this event")
        except Exception:
            self.db.rollback()
            raise

        logger.info("User %s booked event %s (booking %s)", user.id, event_id, booking.id)
        return self.get_booking(booking.id), ticket

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        return (
            self.db.query(Booking)
            .options(joinedload(Booking.event))
            .filter(Booking.id == booking_id)
            .first()
        )

    def get_user_bookings(self, user_id: str) -> List[Booking]:
        return (
            self.db.query(Booking)
            .options(joinedload(Booking.event))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
            .all()
        )

    def cancel_booking(self, booking_id: str, user) -> Booking:
        booking = self.get_booking(booking_id)
        if not booking or booking.user_id != user.id:
            raise LookupError("Booking not found")

        if booking.status == BookingStatus.CANCELLED.value:
            raise ValueError("Booking is already cancelled")
        if booking.status == BookingStatus.CHECKED_IN.value:
            raise ValueError("Cannot cancel a booking that has been checked in")
        if booking.event.date <= utcnow():
            raise ValueError("Cannot cancel booking for past events")

        # Guarded so a concurrent check-in is never overwritten
        result = self.db.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status.in_([BookingStatus.CONFIRMED.value, BookingStatus.PENDING.value]),
            )
            .values(status=BookingStatus.CANCELLED.value)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount != 1:
            raise ValueError("Booking can no longer be cancelled")

        booking = self.get_booking(booking_id)

        logger.info("Booking %s cancelled by user %s", booking.id, user.id)
        return booking
