import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Dict, Optional

from clubhub.tickets.policy import utcnow

logger = logging.getLogger(__name__)

class OTPOutcome(str, Enum):
    VERIFIED = "verified"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    INVALID = "invalid"
    TOO_MANY_ATTEMPTS = "too_many_attempts"

@dataclass
class OTPResult:
    outcome: OTPOutcome
    message: str
    attempts_left: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.outcome == OTPOutcome.VERIFIED

@dataclass
class _OTPEntry:
    code: str
    expires_at: datetime
    attempts: int = 0

class InMemoryOTPStore:
    """Thread-safe store of email verification codes for a single process.

    Each email has at most one live code with an expiry and an attempt
    budget. The application keeps one store on ``app.state.otp_store``.
    Issuing a code sweeps out expired entries.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=10),
        max_attempts: int = 5,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.ttl = ttl
        self.max_attempts = max_attempts
        self.clock = clock
        self._entries: Dict[str, _OTPEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    def issue(self, email: str) -> str:
        """Create a fresh 6-digit code for an email, replacing any earlier one"""
        code = f"{secrets.randbelow(900000) + 100000}"
        now = self.clock()
        with self._lock:
            self._drop_expired(now)
            self._entries[self._key(email)] = _OTPEntry(code=code, expires_at=now + self.ttl)
        logger.debug("OTP for %s: %s", email, code)
        return code

    def verify(self, email: str, code: str) -> OTPResult:
        key = self._key(email)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return OTPResult(OTPOutcome.NOT_FOUND, "OTP not found or expired")

            if self.clock() > entry.expires_at:
                del self._entries[key]
                return OTPResult(OTPOutcome.EXPIRED, "OTP has expired")

            if entry.attempts >= self.max_attempts:
                del self._entries[key]
                return OTPResult(OTPOutcome.TOO_MANY_ATTEMPTS, "Too many failed attempts. Please request a new OTP")

            if not secrets.compare_digest(entry.code, code.strip()):
                entry.attempts += 1
                return OTPResult(
                    OTPOutcome.INVALID,
                    "Invalid OTP",
                    attempts_left=self.max_attempts - entry.attempts,
                )

            del self._entries[key]
            return OTPResult(OTPOutcome.VERIFIED, "Email verified successfully")

    def purge_expired(self) -> int:
        with self._lock:
            return self._drop_expired(self.clock())

    def pending_count(self) -> int:
        with self._lock:
            return len(self._entries)

    def _drop_expired(self, now: datetime) -> int:
        # Caller holds the lock
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)
