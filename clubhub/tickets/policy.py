from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Tuple

from clubhub.config import settings
from clubhub.tickets.errors import CheckInNotYetOpen, CheckInWindowClosed

def utcnow() -> datetime:
    """Current time as naive UTC, matching what is stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

@dataclass(frozen=True)
class CheckInWindow:
    """Admission window around an event's start time"""

    opens_before: timedelta = timedelta(hours=20)
    closes_after: timedelta = timedelta(hours=2)

    @classmethod
    def from_settings(cls) -> "CheckInWindow":
        return cls(
            opens_before=timedelta(hours=settings.CHECK_IN_OPENS_HOURS_BEFORE),
            closes_after=timedelta(hours=settings.CHECK_IN_CLOSES_HOURS_AFTER),
        )

    def bounds(self, event_date: datetime) -> Tuple[datetime, datetime]:
        return event_date - self.opens_before, event_date + self.closes_after

    def enforce(self, event_date: datetime, now: datetime) -> None:
        opens_at, closes_at = self.bounds(event_date)
        if now < opens_at:
            raise CheckInNotYetOpen(opens_at)
        if now > closes_at:
            raise CheckInWindowClosed(closes_at)
