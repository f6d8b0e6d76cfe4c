# qrlink/models/qr_code.py

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RenderOptions:
    foreground_color: str = "#000000"
    background_color: str = "#ffffff"
    size: int = 400
    margin: int = 2
    error_correction: str = "M"
    style: str = "square"
    logo_url: str | None = None


# -------------------------------
# QR Code Model
# -------------------------------

@dataclass
class QrCode:
    """
    A stored QR code and its short link.
    click_count and updated_at only change through a recorded click.
    """
    id: str
    user_id: str
    short_code: str
    type: str
    content: str
    title: str | None = None
    options: RenderOptions = field(default_factory=RenderOptions)
    click_count: int = 0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
