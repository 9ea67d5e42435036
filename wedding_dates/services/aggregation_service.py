"""
Availability aggregation: per-date unavailability counts across both response modes
"""

from datetime import date
from typing import Dict, Iterable, List, Set, Tuple

from sqlalchemy.orm import Session

from wedding_dates.core.exceptions import InconsistentGuestMode
from wedding_dates.schemas.availability import AttendanceStatus, DateStats, DateSummary, GuestDateStatus
from wedding_dates.schemas.guest import GuestIdentity, ResponseMode
from wedding_dates.services.date_catalog import get_date_catalog
from wedding_dates.services.repositories import GuestResponseRepo, ResponseRecord


def resolve_guest_modes(
    responses: Iterable[ResponseRecord],
) -> Dict[GuestIdentity, Tuple[ResponseMode, Set[str]]]:
    """Group responses by guest into (mode, selected dates).

    Guests keep first-seen order. A guest whose rows disagree on mode raises
    InconsistentGuestMode.
    """
    guests: Dict[GuestIdentity, Tuple[ResponseMode, Set[str]]] = {}
    for record in responses:
        guest = record.guest
        if guest not in guests:
            guests[guest] = (record.response_mode, set())
        mode, selected = guests[guest]
        if mode != record.response_mode:
            raise InconsistentGuestMode(guest.first_name, guest.last_name, {mode.value, record.response_mode.value})
        selected.add(record.date)
    return guests


def compute_unavailability_stats(
    responses: Iterable[ResponseRecord],
    candidate_dates: Iterable[date],
) -> Dict[str, DateStats]:
    """Per candidate date: how many guests cannot attend, and each guest's status.

    Unavailable-mode guests count against the dates they selected. Available-mode
    guests count against every candidate date they did not select, and are listed
    as available (uncounted) on the dates they did select. Selections outside the
    candidate dates are ignored.
    """
    stats: Dict[str, DateStats] = {d.isoformat(): DateStats() for d in candidate_dates}

    def mark(date_key: str, guest: GuestIdentity, status: AttendanceStatus) -> None:
        entry = stats[date_key]
        if status is AttendanceStatus.UNAVAILABLE:
            entry.count += 1
        entry.guests.append(GuestDateStatus(first_name=guest.first_name, last_name=guest.last_name, status=status))

    for guest, (mode, selected) in resolve_guest_modes(responses).items():
        if mode is ResponseMode.UNAVAILABLE:
            for date_key in sorted(selected):
                if date_key in stats:
                    mark(date_key, guest, AttendanceStatus.UNAVAILABLE)
        else:
            for date_key in stats:
                if date_key in selected:
                    mark(date_key, guest, AttendanceStatus.AVAILABLE)
                else:
                    mark(date_key, guest, AttendanceStatus.UNAVAILABLE)

    return stats


def summarize_date(stats: DateStats) -> DateSummary:
    """Display figures for one date cell"""
    unavailable = sum(1 for g in stats.guests if g.status is AttendanceStatus.UNAVAILABLE)
    return DateSummary(
        count=stats.count,
        unavailable_count=unavailable,
        available_count=len(stats.guests) - unavailable,
        has_responses=bool(stats.guests),
    )


class AggregationService:
    """Store-backed entry points for the admin availability view"""

    @staticmethod
    def get_unavailability_stats(db: Session) -> Dict[str, DateStats]:
        return compute_unavailability_stats(
            GuestResponseRepo.list_all(db),
            get_date_catalog().enumerate_candidate_dates(),
        )

    @staticmethod
    def get_stats_with_summary(db: Session) -> List[Dict]:
        """Stats flattened into a date-ordered list for API consumers"""
        stats = AggregationService.get_unavailability_stats(db)
        return [
            {
                "date": date_key,
                **entry.model_dump(mode="json"),
                "summary": summarize_date(entry).model_dump(),
            }
            for date_key, entry in stats.items()
        ]
