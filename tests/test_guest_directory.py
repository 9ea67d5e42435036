"""
Tests for the responded guest directory
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wedding_dates.core.db import Base
from wedding_dates.schemas.guest import GuestIdentity, ResponseMode, SessionContext
from wedding_dates.services.guest_directory import GuestDirectory, list_responded_guests
from wedding_dates.services.repositories import ResponseRecord
from wedding_dates.services.toggle_service import ToggleService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_directory.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

def toggle(db, first_name, last_name, date, mode=ResponseMode.UNAVAILABLE):
    session = SessionContext(guest=GuestIdentity(first_name=first_name, last_name=last_name))
    return ToggleService.toggle_guest_date(session, date, mode, db)

def test_responded_guests_sorted_with_counts(db_session):
    """Alice with two rows sorts before Bob with one"""
    toggle(db_session, "Bob", "Jones", "2025-09-05", ResponseMode.AVAILABLE)
    toggle(db_session, "Alice", "Smith", "2025-09-05")
    toggle(db_session, "Alice", "Smith", "2025-09-06")

    guests = GuestDirectory.get_responded_guests(db_session)

    assert [(g.first_name, g.last_name, g.response_count) for g in guests] == [
        ("Alice", "Smith", 2),
        ("Bob", "Jones", 1),
    ]
    assert guests[0].response_mode is ResponseMode.UNAVAILABLE
    assert guests[1].response_mode is ResponseMode.AVAILABLE

def test_sorting_ignores_case(db_session):
    """Lower-case names interleave with capitalised ones"""
    toggle(db_session, "charlie", "Brown", "2025-09-05")
    toggle(db_session, "Bella", "Swan", "2025-09-05")
    toggle(db_session, "adam", "Ant", "2025-09-05")

    names = [g.first_name for g in GuestDirectory.get_responded_guests(db_session)]

    assert names == ["adam", "Bella", "charlie"]

def test_guests_without_rows_are_absent(db_session):
    """A guest who unselected everything is no longer listed"""
    toggle(db_session, "Alice", "Smith", "2025-09-05")
    toggle(db_session, "Bob", "Jones", "2025-09-05")
    toggle(db_session, "Bob", "Jones", "2025-09-05")

    guests = GuestDirectory.get_responded_guests(db_session)

    assert [g.first_name for g in guests] == ["Alice"]

def test_empty_directory(db_session):
    assert GuestDirectory.get_responded_guests(db_session) == []

def test_response_count_uses_distinct_dates():
    """Duplicate rows for a date count once"""
    responses = [
        ResponseRecord(id=1, first_name="Alice", last_name="Smith", date="2025-09-05", response_mode=ResponseMode.UNAVAILABLE),
        ResponseRecord(id=2, first_name="Alice", last_name="Smith", date="2025-09-05", response_mode=ResponseMode.UNAVAILABLE),
        ResponseRecord(id=3, first_name="Alice", last_name="Smith", date="2025-09-06", response_mode=ResponseMode.UNAVAILABLE),
    ]

    guests = list_responded_guests(responses)

    assert len(guests) == 1
    assert guests[0].response_count == 2

def test_mixed_mode_guest_is_still_listed():
    """Rows disagreeing on mode do not hide the guest from the directory"""
    responses = [
        ResponseRecord(id=1, first_name="Alice", last_name="Smith", date="2025-09-05", response_mode=ResponseMode.UNAVAILABLE),
        ResponseRecord(id=2, first_name="Alice", last_name="Smith", date="2025-09-06", response_mode=ResponseMode.AVAILABLE),
        ResponseRecord(id=3, first_name="Bob", last_name="Jones", date="2025-09-05", response_mode=ResponseMode.AVAILABLE),
    ]

    guests = list_responded_guests(responses)

    assert [(g.first_name, g.response_count) for g in guests] == [("Alice", 2), ("Bob", 1)]
    assert guests[0].response_mode is None
    assert guests[1].response_mode is ResponseMode.AVAILABLE
