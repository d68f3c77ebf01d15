from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from clubhub.database import get_db
from clubhub.models import EventStatus, UserRole
from clubhub.auth.dependencies import require_roles
from clubhub.events.schemas import Club, ClubCreate, Event, EventCreate, EventStatusUpdate
from clubhub.events.event_service import EventService

router = APIRouter()

@router.post("/clubs", response_model=Club, status_code=status.HTTP_201_CREATED)
def create_club(
    club: ClubCreate,
    current_user = Depends(require_roles(UserRole.CLUB, UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Create a club owned by the current user"""
    return EventService(db).create_club(club, current_user)

@router.post("", response_model=Event, status_code=status.HTTP_201_CREATED)
def create_event(
    event: EventCreate,
    current_user = Depends(require_roles(UserRole.CLUB, UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Create an event; it stays pending until an admin approves it"""
    event_service = EventService(db)

    try:
        created = event_service.create_event(event, current_user)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

    return event_service.to_schema(created)

@router.patch("/{event_id}/status", response_model=Event)
def update_event_status(
    event_id: str,
    update: EventStatusUpdate,
    current_user = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Approve or reject an event (admin only)"""
    event_service = EventService(db)

    try:
        event = event_service.set_status(event_id, update.status)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return event_service.to_schema(event)

@router.get("", response_model=List[Event])
def list_events(
    event_status: Optional[EventStatus] = Query(EventStatus.APPROVED, alias="status", description="Filter by event status"),
    db: Session = Depends(get_db)
):
    """List events, approved ones by default"""
    event_service = EventService(db)
    return [event_service.to_schema(e) for e in event_service.list_events(event_status)]

@router.get("/{event_id}", response_model=Event)
def get_event(event_id: str, db: Session = Depends(get_db)):
    """Get event details by ID"""
    event_service = EventService(db)
    event = event_service.get_event(event_id)

    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found"
        )

    return event_service.to_schema(event)
