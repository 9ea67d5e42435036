"""
Wedding Date Finder - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
import uvicorn

from wedding_dates.core.config import settings
from wedding_dates.core.db import engine, Base
from wedding_dates.core.exceptions import AvailabilityError
from wedding_dates.api import routes_admin, routes_guest, routes_public, ws
from wedding_dates.utils.responses import error_response

import wedding_dates.models  # noqa: F401  (registers tables on Base.metadata)

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if not settings.USE_FIREBASE:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    yield
    logger.info("Application shutdown")

app = FastAPI(
    title="Wedding Date Finder",
    description="Collects guest weekend availability and aggregates it for the couple",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AvailabilityError)
async def availability_error_handler(request: Request, exc: AvailabilityError):
    """Domain errors become standard error responses"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return error_response(
        message=exc.message,
        error_code=exc.error_code,
        status_code=exc.status_code
    )

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return error_response(
        message="Invalid input",
        error_code="validation_error",
        details=exc.errors(include_url=False),
        status_code=422
    )

app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_guest.router, prefix="/guest", tags=["guest"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])
app.include_router(ws.router, prefix="/ws", tags=["websocket"])

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "Wedding Date Finder",
        "calendar_url": "/calendar",
        "guest_toggle_url": "/guest/toggle",
        "admin_stats_url": "/admin/stats"
    }

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
