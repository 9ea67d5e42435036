"""
QR code generation for personal guest invitation links
"""

import io
from urllib.parse import urlencode

import qrcode

from wedding_dates.core.config import settings
from wedding_dates.schemas.guest import GuestIdentity

class QRService:
    """Service for generating invitation QR codes"""

    @staticmethod
    def get_invite_url(guest: GuestIdentity) -> str:
        """Calendar URL with the guest's name prefilled"""
        query = urlencode({"firstName": guest.first_name, "lastName": guest.last_name})
        return f"{settings.BASE_URL}/?{query}"

    @staticmethod
    def generate_invite_qr(guest: GuestIdentity, format: str = 'PNG') -> bytes:
        """Generate QR code pointing at the guest's invitation link"""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=4,
        )
        qr.add_data(QRService.get_invite_url(guest))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=format)

        return buffer.getvalue()
