import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from clubhub.models import Booking, BookingStatus
from clubhub.tickets.codec import TicketCodec, token_preview
from clubhub.tickets.errors import (
    AlreadyCheckedIn, BookingCancelled, BookingNotFound, CheckInError,
    CredentialBookingMismatch
)
from clubhub.tickets.policy import CheckInWindow, utcnow
from clubhub.tickets.repository import BookingRepository

logger = logging.getLogger(__name__)

CANCELLED = BookingStatus.CANCELLED.value
CHECKED_IN = BookingStatus.CHECKED_IN.value
ADMISSIBLE_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.PENDING.value)

@dataclass
class CheckInResult:
    booking: Booking
    checked_in_at: datetime

class CheckInVerifier:
    """Validates a presented ticket and admits its booking exactly once.

    Booking states with respect to admission:

        CANCELLED                  terminal, never admitted
        CONFIRMED/PENDING  ----->  CHECKED_IN (terminal)

    The transition is a conditional update on the booking row, so two scans
    of the same ticket racing each other produce one admission and one
    ``AlreadyCheckedIn``.
    """

    def __init__(
        self,
        repository: BookingRepository,
        codec: TicketCodec,
        window: CheckInWindow,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.codec = codec
        self.window = window
        self.clock = clock

    def verify(self, presented_token: str, acting_user) -> CheckInResult:
        if acting_user is None:
            raise ValueError("An acting user is required for check-in")

        actor = f"{getattr(acting_user, 'id', '?')} ({getattr(acting_user, 'role', '?')})"
        try:
            result = self._verify(presented_token)
        except CheckInError as e:
            logger.info(
                "Check-in rejected by %s: %s for token %s",
                actor, e.kind, token_preview(presented_token or ""),
            )
            raise

        logger.info(
            "Booking %s checked in by %s at %s",
            result.booking.id, actor, result.checked_in_at.isoformat(),
        )
        return result

    def _verify(self, presented_token: str) -> CheckInResult:
        now = self.clock()

        credential = self.codec.decode(presented_token, now=now)

        booking = self.repository.find_by_booking_id(credential.booking_id)
        if booking is None:
            raise BookingNotFound()

        if str(booking.id) != credential.booking_id:
            raise CredentialBookingMismatch()

        self._reconcile_stored_token(booking, presented_token)

        if booking.status == CANCELLED:
            raise BookingCancelled()
        if booking.status == CHECKED_IN:
            raise AlreadyCheckedIn(booking.checked_in_at)

        self.window.enforce(booking.event.date, now)

        updated = self.repository.conditional_update_check_in(
            booking.id, ADMISSIBLE_STATUSES, checked_in_at=now
        )
        if updated is None:
            self._raise_conflict(booking.id)

        return CheckInResult(booking=updated, checked_in_at=updated.checked_in_at)

    def _reconcile_stored_token(self, booking: Booking, presented_token: str) -> None:
        """Adopt the presented token as the stored one.

        Only reached once the token is signed, unexpired, an admission ticket
        and names this exact booking. The stored token is a record of what
        was last handed out, not what decides admission.
        """
        presented = presented_token.strip()
        stored = (booking.ticket_token or "").strip()
        if presented == stored:
            return

        logger.warning(
            "Stored ticket for booking %s differs from presented ticket; replacing %s with %s",
            booking.id, token_preview(stored), token_preview(presented),
        )
        self.repository.update_stored_token(booking.id, presented)

    def _raise_conflict(self, booking_id: str) -> None:
        current = self.repository.refresh(booking_id)
        if current is None:
            raise BookingNotFound()
        if current.status == CANCELLED:
            raise BookingCancelled()
        raise AlreadyCheckedIn(current.checked_in_at)
