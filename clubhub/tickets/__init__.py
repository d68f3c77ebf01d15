"""
Ticket issuance and check-in.

- codec.py: signed, self-contained ticket tokens (JWT) and their decoding
- issuer.py: ticket creation for a booking and QR code rendering
- policy.py: the admission window around an event's start
- verifier.py: check-in state transition for a presented ticket
- repository.py: booking reads and guarded writes
- errors.py: check-in outcomes reported to the scanning operator
- ticket_service.py / router.py: the service and its HTTP endpoints
"""

from .codec import TicketCodec, TicketCredential, EVENT_TICKET
from .issuer import IssuedTicket, TicketIssuer
from .policy import CheckInWindow
from .verifier import CheckInResult, CheckInVerifier
from .ticket_service import TicketService

__all__ = [
    "TicketCodec",
    "TicketCredential",
    "EVENT_TICKET",
    "IssuedTicket",
    "TicketIssuer",
    "CheckInWindow",
    "CheckInResult",
    "CheckInVerifier",
    "TicketService",
]
