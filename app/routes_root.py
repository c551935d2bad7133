# routes_root.py
"""
Root / basic endpoints (landing, health, active currency).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from app.config import Settings, get_settings
from app.deps import ok
from app.services.currency import currency_info
from models import utc_now

router = APIRouter()


@router.get("/")
def read_root():
    """
    Landing endpoint: the dashboard is the home page.
    """
    return RedirectResponse(url="/dashboard", status_code=302)


@router.get("/api/health")
def health():
    return {
        "success": True,
        "message": "API is running",
        "timestamp": utc_now().isoformat(),
    }


@router.get("/api/config/currency")
def active_currency(settings: Settings = Depends(get_settings)):
    return ok(currency_info(settings.currency))
