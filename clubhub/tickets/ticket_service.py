import logging
from typing import Optional

from sqlalchemy.orm import Session

from clubhub.models import Booking
from clubhub.tickets.codec import TicketCodec
from clubhub.tickets.errors import TicketIssueError
from clubhub.tickets.issuer import INELIGIBLE_STATUSES, IssuedTicket, TicketIssuer
from clubhub.tickets.policy import CheckInWindow
from clubhub.tickets.repository import BookingRepository
from clubhub.tickets.verifier import CheckInResult, CheckInVerifier

logger = logging.getLogger(__name__)

class TicketService:
    """Ticket issuance and check-in for bookings"""

    def __init__(
        self,
        db: Session,
        codec: Optional[TicketCodec] = None,
        window: Optional[CheckInWindow] = None,
    ):
        self.db = db
        self.repository = BookingRepository(db)
        self.codec = codec or TicketCodec.from_settings()
        self.issuer = TicketIssuer.from_settings(self.codec)
        self.verifier = CheckInVerifier(
            self.repository, self.codec, window or CheckInWindow.from_settings()
        )

    def issue_ticket(self, booking_id: str) -> IssuedTicket:
        """Sign a new ticket for a booking and store it on the booking"""

        booking = self._get_booking(booking_id)
        ticket = self.issuer.issue(booking)
        self.repository.update_stored_token(booking.id, ticket.token)
        return ticket

    def get_ticket(self, booking_id: str) -> IssuedTicket:
        """Return the stored ticket, issuing one if the booking has none yet"""

        booking = self._get_booking(booking_id)
        if booking.status in INELIGIBLE_STATUSES:
            raise TicketIssueError("Cancelled bookings have no ticket")
        if not booking.ticket_token:
            return self.issue_ticket(booking_id)

        return IssuedTicket(
            token=booking.ticket_token,
            qr_code_image=self.issuer.render_qr_data_url(booking.ticket_token),
        )

    def get_ticket_qr_png(self, booking_id: str) -> bytes:
        ticket = self.get_ticket(booking_id)
        return self.issuer.render_qr_png(ticket.token)

    def verify_check_in(self, presented_token: str, acting_user) -> CheckInResult:
        return self.verifier.verify(presented_token, acting_user)

    def _get_booking(self, booking_id: str) -> Booking:
        booking = self.repository.find_by_booking_id(booking_id)
        if not booking:
            raise LookupError("Booking not found")
        return booking
