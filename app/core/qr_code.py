"""
Employee QR code derivation and validation.

Code format: lowercase hex SHA-256 of  phone.strip() + name.strip().lower() + salt.
The phone is only trimmed; formatting characters are kept as entered.
"""

import hashlib
import hmac
import io
from typing import Optional

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from app.core.config import QR_SALT_MIN_LENGTH
from app.core.exceptions import ConfigurationError


class QRCodeService:
    def __init__(self, salt: str) -> None:
        if not salt:
            raise ConfigurationError("QR salt is not configured")
        if len(salt) < QR_SALT_MIN_LENGTH:
            raise ConfigurationError(f"QR salt must be at least {QR_SALT_MIN_LENGTH} characters")
        self._salt = salt

    def generate_code(self, phone: str, name: Optional[str]) -> str:
        """Derive the deterministic code for an employee. A missing name hashes as ""."""
        normalized_phone = phone.strip()
        normalized_name = (name or "").strip().lower()
        payload = f"{normalized_phone}{normalized_name}{self._salt}"
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def validate_code(self, code: str, phone: str, name: Optional[str]) -> bool:
        expected = self.generate_code(phone, name)
        return hmac.compare_digest(code.encode("utf-8"), expected.encode("utf-8"))

    def render_png(self, code: str, box_size: int = 10, border: int = 2) -> bytes:
        """Render a code string as a PNG QR symbol."""
        qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=box_size, border=border)
        qr.add_data(code)
        qr.make(fit=True)
        image = qr.make_image()
        buffer = io.BytesIO()
        image.save(buffer)
        return buffer.getvalue()
