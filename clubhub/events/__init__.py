"""
Clubs and events.

Clubs own events; an event is bookable once an admin approves it. The
event's date anchors the check-in window for its bookings.
"""

from .router import router
from .event_service import EventService

__all__ = ["router", "EventService"]
