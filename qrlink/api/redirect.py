# qrlink/api/redirect.py

import logging
from html import escape
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse

from qrlink.core.content import REDIRECT_TYPES, format_content, parse_wifi
from qrlink.core.errors import NotFoundError
from qrlink.models import QrCode
from qrlink.storage import CodeRegistry, get_code_registry


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def wifi_page(content: str) -> str:
    wifi = parse_wifi(content)
    return (
        "<html><body><h1>WiFi Network</h1>"
        f"<p><strong>Network:</strong> {escape(wifi.ssid or 'Unknown Network')}</p>"
        f"<p><strong>Password:</strong> {escape(wifi.password)}</p>"
        "<p>Scan this QR code with your device to connect automatically.</p>"
        "</body></html>"
    )


def vcard_page(content: str) -> str:
    return f"<html><body><h1>Contact Information</h1><pre>{escape(content)}</pre></body></html>"


def text_page(content: str) -> str:
    return f"<html><body><h1>QR Code Content</h1><p>{escape(content)}</p></body></html>"


def dispatch(qr: QrCode):
    """
    Link-like types redirect to their formatted target.
    wifi, vcard and text answer with a small HTML page instead.
    """
    if qr.type in REDIRECT_TYPES:
        return RedirectResponse(url=format_content(qr.type, qr.content), status_code=302)
    if qr.type == "wifi":
        return HTMLResponse(wifi_page(qr.content))
    if qr.type == "vcard":
        return HTMLResponse(vcard_page(qr.content))
    return HTMLResponse(text_page(qr.content))


@router.get("/r/{short_code}")
def follow_short_code(short_code: str, registry: CodeRegistry = Depends(get_code_registry)):
    qr = registry.get_by_short_code(short_code)
    if qr is None:
        raise NotFoundError("QR code not found")

    qr = registry.record_click(qr.id)
    logger.debug("Short code %s hit, %d clicks", short_code, qr.click_count)
    return dispatch(qr)
