from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from clubhub.models import BookingStatus

class BookingRequest(BaseModel):
    """Request to book a seat at an event"""
    event_id: str

class BookingEvent(BaseModel):
    """Event fields shown alongside a booking"""
    id: str
    title: str
    date: datetime
    venue: str

    class Config:
        from_attributes = True

class Booking(BaseModel):
    """Booking details"""
    id: str
    user_id: str
    event_id: str
    status: BookingStatus
    ticket_token: Optional[str] = None
    checked_in_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    event: BookingEvent

    class Config:
        from_attributes = True

class BookingConfirmation(BaseModel):
    """Booking confirmation with its ticket"""
    message: str = "Event booked successfully"
    booking: Booking
    qr_code_image: str
