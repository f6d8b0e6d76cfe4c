# qrlink/api/analytics.py

from fastapi import APIRouter, Depends

from qrlink.core.security import get_current_user
from qrlink.models import User
from qrlink.storage import CodeRegistry, get_code_registry


router = APIRouter(prefix="/api")


@router.get("/analytics")
def read_analytics(
    current_user: User = Depends(get_current_user),
    registry: CodeRegistry = Depends(get_code_registry),
):
    """
    Click totals across the caller's QR codes, plus the most scanned ones.
    """
    stats = registry.stats_by_owner(current_user.id)
    return {
        "totalCodes": stats["total_codes"],
        "totalClicks": stats["total_clicks"],
        "topCodes": [
            {
                "id": qr.id,
                "title": qr.title,
                "shortCode": qr.short_code,
                "clickCount": qr.click_count,
            }
            for qr in stats["top_codes"]
        ],
    }
