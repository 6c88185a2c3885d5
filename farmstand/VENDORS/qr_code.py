# file: farmstand/VENDORS/qr_code.py
import io

import qrcode
from PIL import Image

from farmstand.core import config


def vendor_page_url(vendor_id: str) -> str:
    return f"{config.PUBLIC_BASE_URL}/vendors/{vendor_id}/page"


def encode(url: str, width: int = None) -> bytes:
    """Render `url` as a square PNG QR code, `width` pixels wide."""
    width = width or config.QR_CODE_WIDTH
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=10, border=4)
    qr.add_data(url)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white").get_image().convert("RGB")
    img = img.resize((width, width), Image.Resampling.NEAREST)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
