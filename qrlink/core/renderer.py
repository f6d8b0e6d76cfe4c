# qrlink/core/renderer.py

import io
import math
import logging

import qrcode
from qrcode.exceptions import DataOverflowError
from qrcode.image.pil import PilImage
from PIL import Image, ImageDraw

from qrlink.core.errors import RenderError
from qrlink.models import RenderOptions


logger = logging.getLogger(__name__)

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}

ROUNDED_STYLES = ("rounded", "dots")
CORNER_RADIUS_RATIO = 0.05
LOGO_RATIO = 0.2
LOGO_PADDING = 10


def encode_qr(data: str, options: RenderOptions) -> Image.Image:
    """
    Encodes data into a QR symbol scaled to options.size pixels square.
    Raises RenderError if the data or the colors cannot be encoded.
    """
    try:
        qr = qrcode.QRCode(
            error_correction=ERROR_CORRECTION_LEVELS.get(options.error_correction, qrcode.constants.ERROR_CORRECT_M),
            border=options.margin,
            image_factory=PilImage,
        )
        qr.add_data(data)
        qr.make(fit=True)

        # Draw at the nearest box size that covers the target width, then scale.
        total_modules = qr.modules_count + 2 * qr.border
        if total_modules > options.size:
            raise ValueError(
                f"{total_modules} modules do not fit in {options.size}px"
            )
        qr.box_size = max(1, math.ceil(options.size / total_modules))

        img = qr.make_image(
            fill_color=options.foreground_color,
            back_color=options.background_color,
        ).convert("RGB")
    except (DataOverflowError, ValueError) as e:
        logger.error("Failed to encode QR code: %s", e)
        raise RenderError("Failed to generate QR code image") from e

    if img.width != options.size:
        img = img.resize((options.size, options.size), Image.Resampling.NEAREST)
    return img


def apply_rounded_corners(img: Image.Image) -> Image.Image:
    radius = int(img.width * CORNER_RADIUS_RATIO)
    mask = Image.new("L", img.size, 0)
    ImageDraw.Draw(mask).rounded_rectangle(
        (0, 0, img.width - 1, img.height - 1), radius=radius, fill=255
    )
    rounded = img.convert("RGBA")
    rounded.putalpha(mask)
    return rounded


def add_logo_placeholder(img: Image.Image, size: int) -> Image.Image:
    # Only a white backing square is drawn; the logo itself is not fetched.
    logo_size = int(size * LOGO_RATIO)
    position = (size - logo_size) // 2
    backing = Image.new(
        "RGBA",
        (logo_size + 2 * LOGO_PADDING, logo_size + 2 * LOGO_PADDING),
        (255, 255, 255, 255),
    )
    framed = img.copy()
    framed.paste(backing, (position - LOGO_PADDING, position - LOGO_PADDING))
    return framed


def to_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_qr(data: str, options: RenderOptions) -> bytes:
    """
    Renders the QR code as PNG bytes.

    Encoding errors propagate as RenderError. The rounded style and the logo
    overlay are best effort: if either step fails, a warning is logged and
    the image from the previous step is used.
    """
    img = encode_qr(data, options)

    if options.style in ROUNDED_STYLES:
        try:
            img = apply_rounded_corners(img)
        except Exception:
            logger.warning("Failed to apply %s style, falling back to unstyled image", options.style, exc_info=True)

    if options.logo_url:
        try:
            img = add_logo_placeholder(img, options.size)
        except Exception:
            logger.warning("Failed to add logo overlay, falling back to image without logo", exc_info=True)

    return to_png(img)
