from datetime import timedelta

import pytest

from clubhub.models import Booking, BookingStatus, UserRole
from clubhub.tickets.policy import utcnow
from clubhub.tickets.ticket_service import TicketService

API = "/api/v1/bookings/verify-qr"


@pytest.fixture
def attendee(make_user):
    return make_user(UserRole.USER, first_name="Ada")


@pytest.fixture
def ticket_for(db_session, make_booking, attendee):
    def _ticket_for(event, status=BookingStatus.CONFIRMED):
        booking = make_booking(attendee, event)
        token = TicketService(db_session).issue_ticket(booking.id).token
        if status != BookingStatus.CONFIRMED:
            booking.status = status.value
            db_session.commit()
        return booking, token

    return _ticket_for


def test_club_operator_checks_attendee_in(client, db_session, club_owner, make_event, ticket_for, auth_headers):
    booking, token = ticket_for(make_event())

    response = client.post(API, json={"qrCode": token}, headers=auth_headers(club_owner))

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Check-in successful"
    assert data["booking"]["status"] == "CHECKED_IN"
    assert data["booking"]["user"]["first_name"] == "Ada"
    assert data["booking"]["event"]["venue"] == "Main Hall"
    assert data["booking"]["event"]["club"]["name"] == "Chess Club"
    assert data["checked_in_at"] == data["booking"]["checked_in_at"]

    db_session.expire_all()
    stored = db_session.get(Booking, booking.id)
    assert stored.status == BookingStatus.CHECKED_IN.value
    assert stored.checked_in_at is not None


def test_admin_may_check_in(client, make_user, make_event, ticket_for, auth_headers):
    _, token = ticket_for(make_event())

    response = client.post(API, json={"qrCode": token}, headers=auth_headers(make_user(UserRole.ADMIN)))

    assert response.status_code == 200


def test_regular_user_may_not_check_in(client, attendee, make_event, ticket_for, auth_headers):
    _, token = ticket_for(make_event())

    response = client.post(API, json={"qrCode": token}, headers=auth_headers(attendee))

    assert response.status_code == 403


def test_check_in_requires_login(client, make_event, ticket_for):
    _, token = ticket_for(make_event())

    assert client.post(API, json={"qrCode": token}).status_code == 401


def test_second_scan_reports_first_check_in(client, club_owner, make_event, ticket_for, auth_headers):
    _, token = ticket_for(make_event())
    first = client.post(API, json={"qrCode": token}, headers=auth_headers(club_owner)).json()

    response = client.post(API, json={"qrCode": token}, headers=auth_headers(club_owner))

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["errorKind"] == "AlreadyCheckedIn"
    assert detail["checkedInAt"] == first["checked_in_at"]


def test_too_early_reports_opening_time(client, club_owner, make_event, ticket_for, auth_headers):
    event = make_event(date=utcnow() + timedelta(days=3))
    _, token = ticket_for(event)

    response = client.post(API, json={"qrCode": token}, headers=auth_headers(club_owner))

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["errorKind"] == "CheckInNotYetOpen"
    assert detail["checkInOpensAt"] == (event.date - timedelta(hours=20)).isoformat()


def test_too_late_reports_closing_time(client, club_owner, make_event, ticket_for, auth_headers):
    event = make_event(date=utcnow() - timedelta(hours=5))
    _, token = ticket_for(event)

    response = client.post(API, json={"qrCode": token}, headers=auth_headers(club_owner))

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["errorKind"] == "CheckInWindowClosed"
    assert detail["checkInClosedAt"] == (event.date + timedelta(hours=2)).isoformat()


def test_cancelled_booking(client, club_owner, make_event, ticket_for, auth_headers):
    _, token = ticket_for(make_event(), status=BookingStatus.CANCELLED)

    response = client.post(API, json={"qrCode": token}, headers=auth_headers(club_owner))

    assert response.status_code == 400
    assert response.json()["detail"]["errorKind"] == "BookingCancelled"


def test_pasted_garbage(client, club_owner, auth_headers):
    response = client.post(API, json={"qrCode": "hello"}, headers=auth_headers(club_owner))

    assert response.status_code == 400
    assert response.json()["detail"]["errorKind"] == "Malformed"


def test_session_token_is_rejected_as_ticket(client, club_owner, auth_headers):
    headers = auth_headers(club_owner)
    session_token = headers["Authorization"].split(" ", 1)[1]

    response = client.post(API, json={"qrCode": session_token}, headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"]["errorKind"] == "WrongType"


def test_ticket_for_deleted_booking(client, db_session, club_owner, make_event, ticket_for, auth_headers):
    booking, token = ticket_for(make_event())
    db_session.delete(booking)
    db_session.commit()

    response = client.post(API, json={"qrCode": token}, headers=auth_headers(club_owner))

    assert response.status_code == 404
    assert response.json()["detail"]["errorKind"] == "BookingNotFound"


def test_empty_code_is_rejected(client, club_owner, auth_headers):
    response = client.post(API, json={"qrCode": ""}, headers=auth_headers(club_owner))

    assert response.status_code == 422
