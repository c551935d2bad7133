# app/deps.py
# Role: Shared application-level dependencies.
#       Provides the Jinja2 templates loader, the standard SQLAlchemy
#       database session dependency, and the response envelope helpers.

"""
Shared dependencies and helpers for the business manager app.
"""

import os
from typing import Any, Dict, Generator, List

from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from db import SessionLocal

# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------

APP_DIR = os.path.dirname(os.path.abspath(__file__))

# Jinja2 templates loader (used by the HTML dashboard)
templates = Jinja2Templates(directory=os.path.join(APP_DIR, "templates"))

# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# -------------------------------------------------------------------
# Response envelopes
# -------------------------------------------------------------------

def ok(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data}


def ok_list(items: List[Any]) -> Dict[str, Any]:
    return {"success": True, "count": len(items), "data": items}


def ok_message(message: str) -> Dict[str, Any]:
    return {"success": True, "message": message}
