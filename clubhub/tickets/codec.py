import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from clubhub.config import settings
from clubhub.tickets.errors import (
    Expired, Malformed, SignatureInvalid, TicketSigningError, WrongType
)
from clubhub.tickets.policy import utcnow

logger = logging.getLogger(__name__)

EVENT_TICKET = "EVENT_TICKET"

def _to_timestamp(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()

def _from_timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, timezone.utc).replace(tzinfo=None)

def token_preview(token: str, length: int = 16) -> str:
    """Short, log-safe prefix of a token"""
    return f"{token[:length]}..." if token else "<empty>"

@dataclass(frozen=True)
class TicketCredential:
    """Admission rights for one booking. ``issued_at`` is naive UTC, whole seconds."""

    booking_id: str
    user_id: str
    event_id: str
    issued_at: datetime
    type: str = EVENT_TICKET

    @classmethod
    def for_booking(cls, booking, issued_at: Optional[datetime] = None) -> "TicketCredential":
        issued_at = (issued_at or utcnow()).replace(microsecond=0)
        return cls(
            booking_id=str(booking.id),
            user_id=str(booking.user_id),
            event_id=str(booking.event_id),
            issued_at=issued_at,
        )

class TicketCodec:
    """Encode and verify ticket tokens with a symmetric signing key.

    A ticket is a self-contained HS256 JWT naming one booking. The token
    alone tells whether it is genuine, unexpired and an admission ticket;
    whether the booking behind it is still admissible is decided later
    against the database.
    """

    def __init__(
        self,
        secret_key: Optional[str],
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(days=100),
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime

    @classmethod
    def from_settings(cls) -> "TicketCodec":
        return cls(
            secret_key=settings.ticket_secret_key,
            algorithm=settings.ALGORITHM,
            lifetime=timedelta(days=settings.TICKET_TOKEN_EXPIRE_DAYS),
        )

    def encode(self, credential: TicketCredential) -> str:
        if not self.secret_key:
            raise TicketSigningError("Ticket signing key is not configured")

        issued_at = int(_to_timestamp(credential.issued_at))
        payload = {
            "bookingId": credential.booking_id,
            "userId": credential.user_id,
            "eventId": credential.event_id,
            "type": credential.type,
            "iat": issued_at,
            "exp": issued_at + int(self.lifetime.total_seconds()),
        }

        try:
            return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise TicketSigningError(f"Failed to sign ticket: {e}") from e

    def decode(self, token: str, now: Optional[datetime] = None) -> TicketCredential:
        if not self.secret_key:
            raise TicketSigningError("Ticket signing key is not configured")
        if not isinstance(token, str) or not token.strip():
            raise Malformed()

        clean_token = token.strip()
        payload = self._verify_signature(clean_token)

        expires_at = payload.get("exp")
        if not isinstance(expires_at, (int, float)):
            raise Malformed("Ticket has no usable expiry")
        now = now or utcnow()
        if _to_timestamp(now) > expires_at:
            raise Expired()

        if payload.get("type") != EVENT_TICKET:
            logger.warning("Rejected token of type %r", payload.get("type"))
            raise WrongType()

        return self._credential_from_payload(payload)

    def _verify_signature(self, token: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                # Expiry is checked against our own clock after the signature
                options={"verify_exp": False, "verify_iat": False, "verify_nbf": False},
            )
        except jwt.InvalidSignatureError:
            logger.info("Ticket signature mismatch for token %s", token_preview(token))
            raise SignatureInvalid()
        except jwt.InvalidTokenError as e:
            logger.info("Malformed ticket %s: %s", token_preview(token), e)
            raise Malformed()

        if not isinstance(payload, dict):
            raise Malformed()
        return payload

    @staticmethod
    def _credential_from_payload(payload: Dict[str, Any]) -> TicketCredential:
        identifiers = {}
        for claim in ("bookingId", "userId", "eventId"):
            value = payload.get(claim)
            if not isinstance(value, str) or not value:
                raise Malformed(f"Ticket is missing {claim}")
            identifiers[claim] = value

        issued_at = payload.get("iat")
        if not isinstance(issued_at, (int, float)):
            raise Malformed("Ticket is missing its issue time")

        return TicketCredential(
            booking_id=identifiers["bookingId"],
            user_id=identifiers["userId"],
            event_id=identifiers["eventId"],
            issued_at=_from_timestamp(issued_at),
            type=payload["type"],
        )
