"""
Admin API routes - requires authentication
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from wedding_dates.core.db import get_db
from wedding_dates.schemas.availability import DisabledDateToggleRequest
from wedding_dates.schemas.guest import GuestIdentity, SessionContext
from wedding_dates.services.aggregation_service import AggregationService
from wedding_dates.services.broadcast_service import BroadcastService
from wedding_dates.services.date_catalog import get_date_catalog
from wedding_dates.services.excel_service import ExcelService
from wedding_dates.services.guest_directory import GuestDirectory
from wedding_dates.services.qr_service import QRService
from wedding_dates.services.toggle_service import ToggleService
from wedding_dates.api.ws import websocket_manager
from wedding_dates.utils.security import get_admin_session, verify_admin_token
from wedding_dates.utils.responses import success_response, error_response

router = APIRouter()

broadcast_service = BroadcastService(websocket_manager)

@router.get("/stats")
async def get_unavailability_stats(
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Per-date unavailability counts with guest breakdown"""
    return success_response(
        message="Availability retrieved successfully",
        data={"dates": AggregationService.get_stats_with_summary(db)}
    )

@router.get("/guests")
async def get_responded_guests(
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Guests who have responded, by name"""
    guests = GuestDirectory.get_responded_guests(db)
    return success_response(
        message="Responded guests retrieved successfully",
        data={
            "guests": [g.model_dump(mode="json") for g in guests],
            "total": len(guests)
        }
    )

@router.post("/disabled-dates/toggle")
async def toggle_disabled_date(
    toggle_data: DisabledDateToggleRequest,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_admin_session)
):
    """Disable a date for all guests, or re-enable it"""
    if not get_date_catalog().is_candidate_date(toggle_data.date):
        return error_response(
            message=f"{toggle_data.date} is not one of the dates on offer",
            error_code="not_a_candidate_date",
            status_code=422
        )

    disabled = ToggleService.toggle_disabled_date(
        session=session,
        date=toggle_data.date,
        db=db,
        reason=toggle_data.reason
    )

    await broadcast_service.broadcast_date_toggled(toggle_data.date, disabled)

    state = "disabled" if disabled else "enabled"
    return success_response(
        message=f"Date {toggle_data.date} has been {state} for all users",
        data={"date": toggle_data.date, "disabled": disabled}
    )

@router.get("/export/availability.xlsx")
async def export_availability(
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Download availability and responded guests as Excel"""
    excel_content = ExcelService.export_availability(
        stats=AggregationService.get_unavailability_stats(db),
        disabled_dates=ToggleService.list_disabled_dates(db),
        guests=GuestDirectory.get_responded_guests(db)
    )

    return Response(
        content=excel_content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=wedding_availability.xlsx"}
    )

@router.get("/invites/qr.png")
async def get_invite_qr(
    first_name: str = Query(..., min_length=1, max_length=100),
    last_name: str = Query(..., min_length=1, max_length=100),
    token: str = Depends(verify_admin_token)
):
    """QR code for a guest's personal invitation link"""
    guest = GuestIdentity(first_name=first_name, last_name=last_name)
    qr_bytes = QRService.generate_invite_qr(guest)

    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": "inline; filename=invite.png"}
    )
