"""
Toggle service: add/remove guest date selections and admin-disabled dates
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from wedding_dates.core.exceptions import AdminRequired, GuestIdentityRequired, InconsistentGuestMode
from wedding_dates.schemas.guest import GuestIdentity, ResponseMode, SessionContext
from wedding_dates.services.repositories import DisabledDateRepo, GuestResponseRepo

logger = logging.getLogger(__name__)


def _require_guest(session: SessionContext) -> GuestIdentity:
    if session.guest is None:
        raise GuestIdentityRequired()
    return session.guest


class ToggleService:
    """Idempotent insert-or-delete operations over the response store.

    Dates are not checked against the candidate catalog here; the routes only
    forward candidate dates.
    """

    @staticmethod
    def toggle_guest_date(
        session: SessionContext,
        date: str,
        response_mode: ResponseMode,
        db: Session
    ) -> bool:
        """Select or unselect a date for the session's guest.

        Returns True when the date is now selected, False when the existing
        selection was removed. Removal ignores the mode the row was stored
        with; inserting under a different mode than the guest's other rows
        raises InconsistentGuestMode.
        """
        guest = _require_guest(session)

        existing = GuestResponseRepo.find(db, guest, date)
        if existing:
            GuestResponseRepo.delete(db, existing.id)
            logger.info(f"{guest.full_name} unselected {date}")
            return False

        stored_modes = {r.response_mode for r in GuestResponseRepo.list_for_guest(db, guest)}
        if stored_modes and stored_modes != {response_mode}:
            raise InconsistentGuestMode(
                guest.first_name,
                guest.last_name,
                {m.value for m in stored_modes} | {response_mode.value},
            )

        GuestResponseRepo.insert(db, guest, date, response_mode)
        logger.info(f"{guest.full_name} selected {date} ({response_mode.value})")
        return True

    @staticmethod
    def switch_response_mode(
        session: SessionContext,
        response_mode: ResponseMode,
        db: Session
    ) -> int:
        """Clear every selection of the guest and record their new mode.

        Each selection is removed with its own delete, so a failure part way
        leaves a smaller but still consistent set that a retry finishes.
        Returns the number of selections cleared.
        """
        guest = _require_guest(session)

        cleared = 0
        for record in GuestResponseRepo.list_for_guest(db, guest):
            GuestResponseRepo.delete(db, record.id)
            cleared += 1

        GuestResponseRepo.set_mode(db, guest, response_mode)
        logger.info(f"{guest.full_name} switched to {response_mode.value} mode, cleared {cleared} selections")
        return cleared

    @staticmethod
    def toggle_disabled_date(
        session: SessionContext,
        date: str,
        db: Session,
        reason: Optional[str] = None
    ) -> bool:
        """Disable or re-enable a date for all guests.

        Returns True when the date is now disabled, False when it was re-enabled.
        """
        if not session.is_admin:
            raise AdminRequired()

        existing = DisabledDateRepo.find(db, date)
        if existing:
            DisabledDateRepo.delete(db, existing.id)
            logger.info(f"Date {date} enabled for all guests")
            return False

        DisabledDateRepo.insert(db, date, reason)
        logger.info(f"Date {date} disabled for all guests")
        return True

    @staticmethod
    def list_guest_dates(guest: GuestIdentity, db: Session) -> List[str]:
        """Dates the guest has selected, ascending"""
        return sorted(r.date for r in GuestResponseRepo.list_for_guest(db, guest))

    @staticmethod
    def list_disabled_dates(db: Session) -> List[str]:
        return [r.date for r in DisabledDateRepo.list_all(db)]
