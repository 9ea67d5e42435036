"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from wedding_dates.core.db import get_db
from wedding_dates.services.date_catalog import get_date_catalog
from wedding_dates.services.toggle_service import ToggleService
from wedding_dates.utils.responses import success_response

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/calendar")
async def get_calendar():
    """Months on offer and their candidate weekend dates"""
    months = get_date_catalog().months()
    return success_response(
        message="Calendar retrieved successfully",
        data={"months": [m.model_dump() for m in months]}
    )

@router.get("/disabled-dates")
async def get_disabled_dates(db: Session = Depends(get_db)):
    """Dates the administrator has taken off the table"""
    return success_response(
        message="Disabled dates retrieved successfully",
        data={"dates": ToggleService.list_disabled_dates(db)}
    )
