from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from clubhub.database import get_db
from clubhub.models import UserRole
from clubhub.auth.dependencies import get_current_user, require_roles
from clubhub.tickets.errors import CheckInError, TicketIssueError
from clubhub.tickets.repository import BookingRepository
from clubhub.tickets.schemas import CheckInBooking, CheckInRequest, CheckInResponse, TicketResponse
from clubhub.tickets.ticket_service import TicketService

router = APIRouter()

def _get_owned_booking(booking_id: str, current_user, db: Session):
    booking = BookingRepository(db).find_by_booking_id(booking_id)

    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found"
        )

    if booking.user_id != current_user.id and current_user.role != UserRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Booking does not belong to you"
        )

    return booking

# Check-in Endpoints
@router.post("/verify-qr", response_model=CheckInResponse)
def verify_qr_code(
    request: CheckInRequest,
    current_user = Depends(require_roles(UserRole.CLUB, UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Verify a scanned ticket and check its booking in (club organisers and admins)"""

    ticket_service = TicketService(db)

    try:
        result = ticket_service.verify_check_in(request.qr_code, current_user)
    except CheckInError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.to_detail()
        )

    return CheckInResponse(
        booking=CheckInBooking.model_validate(result.booking),
        checked_in_at=result.checked_in_at
    )

# Ticket Endpoints
@router.get("/{booking_id}/ticket", response_model=TicketResponse)
def get_ticket(
    booking_id: str,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the signed ticket and its QR code for a booking"""

    _get_owned_booking(booking_id, current_user, db)

    try:
        ticket = TicketService(db).get_ticket(booking_id)
    except TicketIssueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return TicketResponse(
        booking_id=booking_id,
        token=ticket.token,
        qr_code_image=ticket.qr_code_image
    )

@router.get("/{booking_id}/ticket/qr")
def get_ticket_qr_code(
    booking_id: str,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the ticket QR code as a PNG image"""

    _get_owned_booking(booking_id, current_user, db)

    try:
        png = TicketService(db).get_ticket_qr_png(booking_id)
    except TicketIssueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="ticket_{booking_id}_qr.png"'}
    )
