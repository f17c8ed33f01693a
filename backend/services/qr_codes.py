"""QR code generation for building (client) labels."""

from __future__ import annotations

import base64
from io import BytesIO

import qrcode
from PIL import Image
from PIL.Image import Resampling
from qrcode.constants import ERROR_CORRECT_M

# Gallery / print sheet QR
QR_GALLERY_WIDTH = 300
QR_GALLERY_MARGIN = 1
QR_GALLERY_DARK = "#000000"

# Management view download
QR_DOWNLOAD_WIDTH = 400
QR_DOWNLOAD_MARGIN = 2
QR_DOWNLOAD_DARK = "#1e293b"

QR_LIGHT = "#ffffff"
QR_BOX_SIZE = 10  # Rendered box size before resizing to the target width

CLIENT_CODE_PREFIX = "CLI"
REGISTRATION_CODE_PREFIX = "MIREGA"


def client_code(client_id: str) -> str:
    """Code printed into gallery QR labels, e.g. CLI-3F2A9C1B."""
    return f"{CLIENT_CODE_PREFIX}-{client_id[:8].upper()}"


def registration_code(client_id: str) -> str:
    """Code stored in mnt_client_qr_codes, e.g. MIREGA-3F2A9C1B."""
    return f"{REGISTRATION_CODE_PREFIX}-{client_id[:8].upper()}"


def generate_qr_image(
    data: str,
    width: int = QR_GALLERY_WIDTH,
    margin: int = QR_GALLERY_MARGIN,
    dark: str = QR_GALLERY_DARK,
    light: str = QR_LIGHT,
) -> Image.Image:
    """Generate a square QR code image.

    Args:
        data: Text to encode.
        width: Output width/height in pixels.
        margin: Quiet zone, in QR modules.
        dark: Module color.
        light: Background color.

    Returns:
        RGB PIL Image of width x width pixels.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=QR_BOX_SIZE,
        border=margin,
    )
    qr.add_data(data)
    qr.make(fit=True)

    qr_img = qr.make_image(fill_color=dark, back_color=light).convert("RGB")

    # Nearest keeps module edges sharp for scanners
    return qr_img.resize((width, width), Resampling.NEAREST)


def generate_qr_png(data: str, **kwargs) -> bytes:
    """Generate a QR code and return the PNG bytes."""
    buffer = BytesIO()
    generate_qr_image(data, **kwargs).save(buffer, format="PNG")
    return buffer.getvalue()


def generate_qr_data_url(data: str, **kwargs) -> str:
    """Generate a QR code as a base64 PNG data URL for <img src>."""
    encoded = base64.b64encode(generate_qr_png(data, **kwargs)).decode()
    return f"data:image/png;base64,{encoded}"
