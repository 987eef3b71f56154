import base64
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_M


def render_png(data: str, box_size: int = 8) -> bytes:
    """Encode ``data`` as a black-on-white QR code PNG, sized to fit."""
    qr = qrcode.QRCode(version=None, box_size=box_size, border=4, error_correction=ERROR_CORRECT_M)
    qr.add_data(data)
    qr.make(fit=True)
    out = BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(out)
    return out.getvalue()


def short_url_qr(short_url: str) -> str:
    return base64.b64encode(render_png(short_url)).decode("ascii")
