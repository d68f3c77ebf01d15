from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class CheckInRequest(BaseModel):
    """Ticket text captured by the scanner or pasted by the operator"""
    qr_code: str = Field(..., alias="qrCode", min_length=1)

    class Config:
        populate_by_name = True

class CheckInUser(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str

    class Config:
        from_attributes = True

class CheckInClub(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True

class CheckInEvent(BaseModel):
    id: str
    title: str
    date: datetime
    venue: str
    club: CheckInClub

    class Config:
        from_attributes = True

class CheckInBooking(BaseModel):
    id: str
    status: str
    checked_in_at: Optional[datetime] = None
    user: CheckInUser
    event: CheckInEvent

    class Config:
        from_attributes = True

class CheckInResponse(BaseModel):
    message: str = "Check-in successful"
    booking: CheckInBooking
    checked_in_at: datetime

class TicketResponse(BaseModel):
    booking_id: str
    token: str
    qr_code_image: str
