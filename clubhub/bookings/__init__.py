"""
Event Booking Module

Members book a seat at an approved event and receive a signed ticket with a
QR code in the same step. One booking per member per event; bookings can be
cancelled until the event starts and until they have been checked in.

Key Components:
- booking_service.py: booking creation, listing and cancellation
- router.py: FastAPI endpoints for members' bookings
- schemas.py: Pydantic models for booking data

Ticket issuance and check-in live in ``clubhub.tickets``.
"""

from .router import router
from .booking_service import BookingService
from .schemas import BookingRequest, Booking, BookingConfirmation

__all__ = [
    "router",
    "BookingService",
    "BookingRequest",
    "Booking",
    "BookingConfirmation",
]
