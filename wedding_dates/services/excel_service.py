"""
Excel export of aggregate availability for the administrator
"""

import io
from datetime import date
from typing import Dict, Iterable, List

import pandas as pd

from wedding_dates.schemas.availability import AttendanceStatus, DateStats
from wedding_dates.schemas.guest import RespondedGuest
from wedding_dates.services.aggregation_service import summarize_date

class ExcelService:
    """Service for building availability workbooks"""

    AVAILABILITY_COLUMNS = [
        'Date', 'Weekday', 'Disabled', 'Unavailable Count', 'Available Count',
        'Unavailable Guests', 'Available Guests'
    ]
    GUEST_COLUMNS = ['Name', 'Response Mode', 'Responses']

    @staticmethod
    def _names(stats: DateStats, status: AttendanceStatus) -> str:
        return ", ".join(
            f"{g.first_name} {g.last_name}" for g in stats.guests if g.status is status
        )

    @staticmethod
    def build_availability_frame(
        stats: Dict[str, DateStats],
        disabled_dates: Iterable[str]
    ) -> pd.DataFrame:
        """One row per candidate date"""
        disabled = set(disabled_dates)
        rows: List[Dict] = []
        for date_key in sorted(stats):
            entry = stats[date_key]
            summary = summarize_date(entry)
            rows.append({
                'Date': date_key,
                'Weekday': date.fromisoformat(date_key).strftime('%A'),
                'Disabled': 'Yes' if date_key in disabled else 'No',
                'Unavailable Count': summary.count,
                'Available Count': summary.available_count,
                'Unavailable Guests': ExcelService._names(entry, AttendanceStatus.UNAVAILABLE),
                'Available Guests': ExcelService._names(entry, AttendanceStatus.AVAILABLE),
            })
        return pd.DataFrame(rows, columns=ExcelService.AVAILABILITY_COLUMNS)

    @staticmethod
    def build_guest_frame(guests: Iterable[RespondedGuest]) -> pd.DataFrame:
        rows = [
            {
                'Name': f"{g.first_name} {g.last_name}",
                'Response Mode': g.response_mode.value if g.response_mode else 'mixed',
                'Responses': g.response_count,
            }
            for g in guests
        ]
        return pd.DataFrame(rows, columns=ExcelService.GUEST_COLUMNS)

    @staticmethod
    def export_availability(
        stats: Dict[str, DateStats],
        disabled_dates: Iterable[str],
        guests: Iterable[RespondedGuest]
    ) -> bytes:
        """Export availability and the guest directory to an Excel workbook"""
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            ExcelService.build_availability_frame(stats, disabled_dates).to_excel(
                writer, index=False, sheet_name='Availability'
            )
            ExcelService.build_guest_frame(guests).to_excel(
                writer, index=False, sheet_name='Responded Guests'
            )

        return buffer.getvalue()
