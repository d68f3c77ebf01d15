from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from clubhub.models import Booking, BookingStatus, Event

class BookingRepository:
    """Booking reads and guarded writes used by ticketing"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_booking_id(self, booking_id: str) -> Optional[Booking]:
        return (
            self.db.query(Booking)
            .options(
                joinedload(Booking.user),
                joinedload(Booking.event).joinedload(Event.club),
            )
            .filter(Booking.id == booking_id)
            .first()
        )

    def conditional_update_check_in(
        self,
        booking_id: str,
        expected_statuses: Iterable[str],
        checked_in_at: datetime,
    ) -> Optional[Booking]:
        """Move a booking to CHECKED_IN only if it is still in an expected status.

        Returns the refreshed booking, or None when another writer got there
        first.
        """
        result = self.db.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status.in_(list(expected_statuses)))
            .values(status=BookingStatus.CHECKED_IN.value, checked_in_at=checked_in_at)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

        if result.rowcount != 1:
            return None
        return self.refresh(booking_id)

    def update_stored_token(self, booking_id: str, token: str) -> None:
        self.db.execute(
            update(Booking)
            .where(Booking.id == booking_id)
            .values(ticket_token=token)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

    def refresh(self, booking_id: str) -> Optional[Booking]:
        self.db.expire_all()
        return self.find_by_booking_id(booking_id)
