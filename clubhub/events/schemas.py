from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from clubhub.models import EventStatus

class ClubCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

class Club(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    owner_id: str

    class Config:
        from_attributes = True

class EventCreate(BaseModel):
    club_id: str
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    venue: str = Field(..., min_length=1, max_length=255)
    date: datetime
    max_seats: int = Field(..., ge=1)

class EventStatusUpdate(BaseModel):
    status: EventStatus

class Event(BaseModel):
    id: str
    club_id: str
    title: str
    description: Optional[str] = None
    venue: str
    date: datetime
    max_seats: int
    status: EventStatus
    seats_booked: int = 0
    club_name: Optional[str] = None

    class Config:
        from_attributes = True
