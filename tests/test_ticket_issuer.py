import base64
from datetime import datetime
from io import BytesIO
from types import SimpleNamespace

import pytest
from PIL import Image

from clubhub.tickets.codec import TicketCodec
from clubhub.tickets.errors import TicketIssueError, TicketSigningError
from clubhub.tickets.issuer import TicketIssuer

ISSUED_AT = datetime(2026, 3, 1, 12, 0, 0)


def booking_stub(status="CONFIRMED"):
    return SimpleNamespace(id="booking-1", user_id="user-1", event_id="event-1", status=status)


@pytest.fixture
def issuer(ticket_codec):
    return TicketIssuer(ticket_codec, qr_size=400)


def test_issue_returns_signed_token_for_booking(issuer, ticket_codec):
    ticket = issuer.issue(booking_stub(), issued_at=ISSUED_AT)

    credential = ticket_codec.decode(ticket.token, now=ISSUED_AT)
    assert credential.booking_id == "booking-1"
    assert credential.user_id == "user-1"
    assert credential.event_id == "event-1"
    assert credential.issued_at == ISSUED_AT


def test_issue_renders_square_png_data_url(issuer):
    ticket = issuer.issue(booking_stub(), issued_at=ISSUED_AT)

    prefix = "data:image/png;base64,"
    assert ticket.qr_code_image.startswith(prefix)

    png = base64.b64decode(ticket.qr_code_image[len(prefix):])
    image = Image.open(BytesIO(png))
    assert image.format == "PNG"
    assert image.size == (400, 400)


def test_issuing_twice_gives_two_valid_tokens(issuer, ticket_codec):
    first = issuer.issue(booking_stub(), issued_at=datetime(2026, 3, 1, 12, 0, 0))
    second = issuer.issue(booking_stub(), issued_at=datetime(2026, 3, 1, 12, 0, 5))

    assert first.token != second.token
    now = datetime(2026, 3, 2)
    assert ticket_codec.decode(first.token, now=now).booking_id == "booking-1"
    assert ticket_codec.decode(second.token, now=now).booking_id == "booking-1"


def test_cancelled_booking_gets_no_ticket(issuer):
    with pytest.raises(TicketIssueError):
        issuer.issue(booking_stub(status="CANCELLED"))


def test_signing_failure_propagates():
    issuer = TicketIssuer(TicketCodec(None))

    with pytest.raises(TicketSigningError):
        issuer.issue(booking_stub())


def test_render_qr_png(issuer):
    png = issuer.render_qr_png("some.ticket.token")

    assert png.startswith(b"\x89PNG")
