from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from clubhub.database import get_db
from clubhub.auth.dependencies import get_current_user
from clubhub.bookings.schemas import Booking, BookingConfirmation, BookingRequest
from clubhub.bookings.booking_service import BookingService

router = APIRouter()

@router.post("", response_model=BookingConfirmation, status_code=status.HTTP_201_CREATED)
def book_event(
    request: BookingRequest,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Book a seat at an event and receive the ticket QR code"""

    booking_service = BookingService(db)

    try:
        booking, ticket = booking_service.book_event(request.event_id, current_user)
    except LookupError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return BookingConfirmation(
        booking=Booking.model_validate(booking),
        qr_code_image=ticket.qr_code_image
    )

@router.get("/my-bookings", response_model=List[Booking])
def get_my_bookings(
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get all bookings of the current user"""
    return BookingService(db).get_user_bookings(current_user.id)

@router.patch("/{booking_id}/cancel", response_model=Booking)
def cancel_booking(
    booking_id: str,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Cancel one of the current user's bookings"""

    try:
        return BookingService(db).cancel_booking(booking_id, current_user)
    except LookupError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
