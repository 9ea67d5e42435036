"""
Guest-facing API routes
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from wedding_dates.core.db import get_db
from wedding_dates.schemas.guest import GuestIdentity, SessionContext, SubmitRequest, SwitchModeRequest, ToggleDateRequest
from wedding_dates.services.broadcast_service import BroadcastService
from wedding_dates.services.date_catalog import get_date_catalog
from wedding_dates.services.repositories import DisabledDateRepo
from wedding_dates.services.toggle_service import ToggleService
from wedding_dates.api.ws import websocket_manager
from wedding_dates.utils.security import rate_limit_check, get_client_ip
from wedding_dates.utils.responses import success_response, error_response, rate_limit_error

router = APIRouter()

broadcast_service = BroadcastService(websocket_manager)

def _guest_session(guest: GuestIdentity) -> SessionContext:
    return SessionContext(
        guest=GuestIdentity(first_name=guest.first_name, last_name=guest.last_name)
    )

@router.get("/dates")
async def get_guest_dates(
    first_name: str = Query(..., min_length=1, max_length=100),
    last_name: str = Query(..., min_length=1, max_length=100),
    db: Session = Depends(get_db)
):
    """Dates the guest has selected so far"""
    guest = GuestIdentity(first_name=first_name, last_name=last_name)
    return success_response(
        message="Selections retrieved successfully",
        data={"dates": ToggleService.list_guest_dates(guest, db)}
    )

@router.post("/toggle")
async def toggle_date(
    request: Request,
    toggle_data: ToggleDateRequest,
    db: Session = Depends(get_db)
):
    """Select or unselect one date for a guest"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        rate_limit_error()

    if not get_date_catalog().is_candidate_date(toggle_data.date):
        return error_response(
            message=f"{toggle_data.date} is not one of the dates on offer",
            error_code="not_a_candidate_date",
            status_code=422
        )

    if DisabledDateRepo.find(db, toggle_data.date):
        return error_response(
            message=f"{toggle_data.date} is no longer available",
            error_code="date_disabled",
            status_code=409
        )

    session = _guest_session(toggle_data)
    selected = ToggleService.toggle_guest_date(
        session=session,
        date=toggle_data.date,
        response_mode=toggle_data.response_mode,
        db=db
    )

    await broadcast_service.broadcast_response_toggled(
        guest=session.guest,
        date=toggle_data.date,
        selected=selected,
        response_mode=toggle_data.response_mode
    )

    return success_response(
        message="Date selected" if selected else "Date unselected",
        data={"date": toggle_data.date, "selected": selected}
    )

@router.post("/switch-mode")
async def switch_mode(
    request: Request,
    switch_data: SwitchModeRequest,
    db: Session = Depends(get_db)
):
    """Change response mode; clears the guest's current selections"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        rate_limit_error()

    session = _guest_session(switch_data)
    cleared = ToggleService.switch_response_mode(
        session=session,
        response_mode=switch_data.response_mode,
        db=db
    )

    await broadcast_service.broadcast_mode_switched(
        guest=session.guest,
        response_mode=switch_data.response_mode,
        cleared=cleared
    )

    return success_response(
        message=f"Switched to {switch_data.response_mode.value} mode",
        data={"response_mode": switch_data.response_mode.value, "cleared": cleared}
    )

@router.post("/submit")
async def submit_response(
    submit_data: SubmitRequest,
    db: Session = Depends(get_db)
):
    """Acknowledge a finished response; selections are already saved per toggle"""
    dates = ToggleService.list_guest_dates(submit_data, db)
    return success_response(
        message="Submitted. Thank you!",
        data={"selection_count": len(dates)}
    )
