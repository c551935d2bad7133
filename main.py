# main.py
# Role: Application entry point for the business manager.
#       Initializes the FastAPI app, configures logging, creates database
#       tables, mounts static assets, and registers all route modules.

"""
Main FastAPI app for the business manager (campaigns, income/expenses,
invoices, dashboards and reports).

Here we only:
- configure logging
- create the FastAPI app
- set up CORS and static files
- create DB tables
- register error handlers and include route modules
"""

import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from db import Base, engine
import models  # noqa: F401  (registers the ORM tables on Base)
from app.config import get_settings
from app.errors import register_exception_handlers
from app.routes_root import router as root_router
from app.routes_transactions import router as transactions_router
from app.routes_campaigns import router as campaigns_router
from app.routes_invoices import router as invoices_router
from app.routes_dashboard import router as dashboard_router
from app.routes_reports import router as reports_router


settings = get_settings()

# -------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("business_manager")

# -------------------------------------------------------------------
# App & DB setup
# -------------------------------------------------------------------

# Create database tables (only if they don't exist yet).
Base.metadata.create_all(bind=engine)

# FastAPI application instance
app = FastAPI(title="Business Manager", debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Serve static files (CSS) from /static
STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app", "static")
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response

# -------------------------------------------------------------------
# Include routers
# -------------------------------------------------------------------

# Root / health / config
app.include_router(root_router)

# Income & expense transactions
app.include_router(transactions_router)

# Marketing campaigns
app.include_router(campaigns_router)

# Invoices (CRUD, mark-as-paid, stats)
app.include_router(invoices_router)

# Dashboard (JSON summaries + HTML page)
app.include_router(dashboard_router)

# Reports and CSV export
app.include_router(reports_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
