# qrlink/models/__init__.py

from .user import User
from .qr_code import QrCode, RenderOptions

__all__ = ["User", "QrCode", "RenderOptions"]
