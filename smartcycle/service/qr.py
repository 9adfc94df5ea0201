"""
QR Codes
--------

Every cycle carries a QR code encoding its identifier. The code is
rendered to SVG so that no imaging library is required, and stored
on the cycle as a data url.
"""
from base64 import b64encode
from io import BytesIO

import qrcode
from qrcode.image.svg import SvgPathImage

from smartcycle.config import qr_code_border


def generate_qr_code(identifier: str, *, border: int = qr_code_border) -> str:
    """Renders the identifier into a ``data:image/svg+xml`` url."""
    code = qrcode.QRCode(border=border, image_factory=SvgPathImage)
    code.add_data(identifier)
    code.make(fit=True)

    buffer = BytesIO()
    code.make_image().save(buffer)
    return "data:image/svg+xml;base64," + b64encode(buffer.getvalue()).decode("ascii")
