from __future__ import annotations

import base64
import io

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M

from stockroom.core.config import settings


def generate_qr_data_url(value: str, size: int | None = None, margin: int | None = None) -> str:
    """Render ``value`` as a square PNG QR code and return it as a data URL."""
    size = size or settings.QR_CODE_DEFAULT_SIZE
    qr = qrcode.QRCode(
        error_correction=ERROR_CORRECT_M,
        box_size=10,
        border=settings.QR_CODE_MARGIN if margin is None else margin,
    )
    qr.add_data(value)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white").get_image()
    img = img.convert("RGB").resize((size, size), Image.NEAREST)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
