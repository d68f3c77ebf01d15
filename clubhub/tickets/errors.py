from datetime import datetime
from typing import Any, Dict, Optional

class TicketSigningError(RuntimeError):
    """Raised when a ticket cannot be signed (missing or unusable signing key)"""

class TicketIssueError(ValueError):
    """Raised when a ticket is requested for a booking that cannot be admitted"""

class CheckInError(Exception):
    """A reported check-in outcome.

    Each subclass is one ``kind`` the scanning surface can render; ``details``
    carries the timestamp the operator needs (when the window opens, when it
    closed, when the attendee was already admitted).
    """

    kind: str = "CheckInError"
    status_code: int = 400
    default_message: str = "Check-in failed"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_detail(self) -> Dict[str, Any]:
        detail = {"errorKind": self.kind, "message": self.message}
        for key, value in self.details.items():
            detail[key] = value.isoformat() if isinstance(value, datetime) else value
        return detail

# Credential-level, raised while decoding

class Malformed(CheckInError):
    kind = "Malformed"
    default_message = "Invalid QR ticket format - token is malformed"

class SignatureInvalid(CheckInError):
    kind = "SignatureInvalid"
    default_message = "Invalid QR ticket signature - token may be corrupted"

class Expired(CheckInError):
    kind = "Expired"
    default_message = "QR ticket has expired"

class WrongType(CheckInError):
    kind = "WrongType"
    default_message = "Invalid ticket type"

# Identity-level

class BookingNotFound(CheckInError):
    kind = "BookingNotFound"
    status_code = 404
    default_message = "Booking not found for this ticket"

class CredentialBookingMismatch(CheckInError):
    kind = "CredentialBookingMismatch"
    default_message = "Ticket does not belong to this booking"

# Status-level

class BookingCancelled(CheckInError):
    kind = "BookingCancelled"
    default_message = "Booking has been cancelled"

class AlreadyCheckedIn(CheckInError):
    kind = "AlreadyCheckedIn"
    status_code = 409
    default_message = "Ticket has already been used for check-in"

    def __init__(self, checked_in_at: Optional[datetime]):
        self.checked_in_at = checked_in_at
        super().__init__(details={"checkedInAt": checked_in_at})

# Time-window-level

class CheckInNotYetOpen(CheckInError):
    kind = "CheckInNotYetOpen"
    default_message = "Check-in is not open yet"

    def __init__(self, opens_at: datetime):
        self.opens_at = opens_at
        super().__init__(
            message=f"Check-in opens at {opens_at.strftime('%Y-%m-%d %H:%M')} UTC",
            details={"checkInOpensAt": opens_at},
        )

class CheckInWindowClosed(CheckInError):
    kind = "CheckInWindowClosed"
    default_message = "Check-in has closed"

    def __init__(self, closes_at: datetime):
        self.closes_at = closes_at
        super().__init__(
            message=f"Check-in closed at {closes_at.strftime('%Y-%m-%d %H:%M')} UTC",
            details={"checkInClosedAt": closes_at},
        )
