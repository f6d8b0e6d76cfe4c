# qrlink/api/qr_codes.py

import logging
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field
from fastapi import APIRouter, Depends, Request, Response, status

from qrlink.core.content import format_content
from qrlink.core.errors import NotFoundError
from qrlink.core.renderer import render_qr
from qrlink.core.security import get_current_user
from qrlink.models import QrCode, RenderOptions, User
from qrlink.storage import CodeRegistry, get_code_registry


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


# -------------------------------
# Schemas
# -------------------------------

class QrCodeCreate(BaseModel):
    """
    Request body for creating a QR code.
    Styling options left unset fall back to their defaults.
    """
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["url", "text", "email", "phone", "sms", "wifi", "vcard"]
    content: str = Field(min_length=1, max_length=4096)
    title: str | None = Field(default=None, max_length=200)
    size: int = Field(default=400, ge=64, le=2048)
    margin: int = Field(default=2, ge=0, le=20)
    foreground_color: str = Field(default="#000000", alias="foregroundColor", pattern=HEX_COLOR)
    background_color: str = Field(default="#ffffff", alias="backgroundColor", pattern=HEX_COLOR)
    error_correction: Literal["L", "M", "Q", "H"] = Field(default="M", alias="errorCorrection")
    style: Literal["square", "rounded", "dots"] = "square"
    logo_url: str | None = Field(default=None, alias="logoUrl", max_length=2048)

    def render_options(self) -> RenderOptions:
        return RenderOptions(
            foreground_color=self.foreground_color,
            background_color=self.background_color,
            size=self.size,
            margin=self.margin,
            error_correction=self.error_correction,
            style=self.style,
            logo_url=self.logo_url or None,
        )


def short_url(request: Request, short_code: str) -> str:
    base_url = request.app.state.settings.public_base_url
    return f"{base_url}/api/r/{short_code}"


def serialize_qr_code(qr: QrCode, request: Request) -> dict:
    return {
        "id": qr.id,
        "userId": qr.user_id,
        "type": qr.type,
        "content": qr.content,
        "title": qr.title,
        "shortCode": qr.short_code,
        "shortUrl": short_url(request, qr.short_code),
        "clickCount": qr.click_count,
        "foregroundColor": qr.options.foreground_color,
        "backgroundColor": qr.options.background_color,
        "size": qr.options.size,
        "margin": qr.options.margin,
        "errorCorrection": qr.options.error_correction,
        "style": qr.options.style,
        "logoUrl": qr.options.logo_url,
        "createdAt": qr.created_at.isoformat(),
        "updatedAt": qr.updated_at.isoformat(),
    }


# -------------------------------
# QR Code Endpoints
# -------------------------------

@router.post("/qr-codes", status_code=status.HTTP_201_CREATED)
def create_qr_code(
    req: QrCodeCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    registry: CodeRegistry = Depends(get_code_registry),
):
    qr = registry.create(
        owner_id=current_user.id,
        qr_type=req.type,
        content=req.content,
        options=req.render_options(),
        title=req.title,
    )
    logger.info("User %s created %s QR code %s (%s)", current_user.id, qr.type, qr.id, qr.short_code)
    return serialize_qr_code(qr, request)


@router.get("/qr-codes")
def list_qr_codes(
    request: Request,
    current_user: User = Depends(get_current_user),
    registry: CodeRegistry = Depends(get_code_registry),
):
    return [serialize_qr_code(qr, request) for qr in registry.list_by_owner(current_user.id)]


@router.get("/qr-codes/{qr_id}")
def get_qr_code(
    qr_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    registry: CodeRegistry = Depends(get_code_registry),
):
    """
    Returns one of the caller's QR codes.
    Another user's code is reported as not found.
    """
    qr = registry.get_by_id(qr_id)
    if qr is None or qr.user_id != current_user.id:
        raise NotFoundError("QR code not found")
    return serialize_qr_code(qr, request)


@router.get("/qr-codes/{qr_id}/image")
def get_qr_code_image(qr_id: str, registry: CodeRegistry = Depends(get_code_registry)):
    qr = registry.get_by_id(qr_id)
    if qr is None:
        raise NotFoundError("QR code not found")

    png = render_qr(format_content(qr.type, qr.content), qr.options)
    return Response(content=png, media_type="image/png")
