import base64
import logging
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from typing import Optional

import qrcode
from qrcode import constants
from PIL import Image

from clubhub.config import settings
from clubhub.models import BookingStatus
from clubhub.tickets.codec import TicketCodec, TicketCredential, token_preview
from clubhub.tickets.errors import TicketIssueError

logger = logging.getLogger(__name__)

INELIGIBLE_STATUSES = {BookingStatus.CANCELLED.value}

@dataclass
class IssuedTicket:
    token: str
    qr_code_image: str  # PNG data URL

class TicketIssuer:
    """Creates signed tickets for bookings and renders them as QR codes"""

    def __init__(self, codec: TicketCodec, qr_size: int = 400, border: int = 4):
        self.codec = codec
        self.qr_size = qr_size
        self.border = border

    @classmethod
    def from_settings(cls, codec: Optional[TicketCodec] = None) -> "TicketIssuer":
        return cls(codec or TicketCodec.from_settings(), qr_size=settings.TICKET_QR_SIZE)

    def issue(self, booking, issued_at: Optional[datetime] = None) -> IssuedTicket:
        """Sign a ticket for an admissible booking.

        Signing failures propagate: a booking without a usable ticket can
        never be checked in.
        """
        if booking.status in INELIGIBLE_STATUSES:
            raise TicketIssueError("Cannot issue a ticket for a cancelled booking")

        credential = TicketCredential.for_booking(booking, issued_at)
        token = self.codec.encode(credential)
        image = self.render_qr_data_url(token)

        logger.info("Issued ticket %s for booking %s", token_preview(token), booking.id)
        return IssuedTicket(token=token, qr_code_image=image)

    def render_qr_png(self, token: str) -> bytes:
        """Render a token as a square black-on-white PNG"""

        qr = qrcode.QRCode(
            version=None,
            error_correction=constants.ERROR_CORRECT_M,
            box_size=10,
            border=self.border,
        )
        qr.add_data(token)
        qr.make(fit=True)

        qr_image = qr.make_image(fill_color="black", back_color="white")
        qr_image = qr_image.resize((self.qr_size, self.qr_size), Image.NEAREST)

        buffer = BytesIO()
        qr_image.save(buffer, format="PNG")
        return buffer.getvalue()

    def render_qr_data_url(self, token: str) -> str:
        encoded = base64.b64encode(self.render_qr_png(token)).decode()
        return f"data:image/png;base64,{encoded}"
