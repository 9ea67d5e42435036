"""
Guest directory: who has responded, and how much
"""

from typing import Dict, Iterable, List, Set, Tuple

from sqlalchemy.orm import Session

from wedding_dates.schemas.guest import RespondedGuest, ResponseMode
from wedding_dates.services.repositories import GuestResponseRepo, ResponseRecord


def list_responded_guests(responses: Iterable[ResponseRecord]) -> List[RespondedGuest]:
    """Guests with at least one selection, sorted case-insensitively by full name.

    A guest whose rows disagree on mode is still listed, with no response_mode.
    """
    dates: Dict[Tuple[str, str], Set[str]] = {}
    modes: Dict[Tuple[str, str], Set[ResponseMode]] = {}
    for record in responses:
        key = (record.first_name, record.last_name)
        dates.setdefault(key, set()).add(record.date)
        modes.setdefault(key, set()).add(record.response_mode)

    guests = []
    for (first_name, last_name), selected in dates.items():
        guest_modes = modes[(first_name, last_name)]
        guests.append(RespondedGuest(
            first_name=first_name,
            last_name=last_name,
            response_count=len(selected),
            response_mode=next(iter(guest_modes)) if len(guest_modes) == 1 else None,
        ))
    return sorted(guests, key=lambda g: f"{g.first_name} {g.last_name}".lower())


class GuestDirectory:
    @staticmethod
    def get_responded_guests(db: Session) -> List[RespondedGuest]:
        return list_responded_guests(GuestResponseRepo.list_all(db))
