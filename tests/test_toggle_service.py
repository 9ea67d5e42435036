"""
Tests for guest and admin toggles against the SQL store
"""

import pytest
from unittest.mock import MagicMock
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from wedding_dates.core.db import Base
from wedding_dates.core.exceptions import AdminRequired, GuestIdentityRequired, InconsistentGuestMode, StoreUnavailable
from wedding_dates.models import DisabledDate, Guest, GuestResponse
from wedding_dates.schemas.guest import GuestIdentity, ResponseMode, SessionContext
from wedding_dates.services.repositories import GuestResponseRepo
from wedding_dates.services.toggle_service import ToggleService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_toggle.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ALICE = GuestIdentity(first_name="Alice", last_name="Smith")
BOB = GuestIdentity(first_name="Bob", last_name="Jones")

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

@pytest.fixture
def alice_session():
    return SessionContext(guest=ALICE)

@pytest.fixture
def admin_session():
    return SessionContext(is_admin=True)

def test_toggle_guest_date_round_trip(db_session, alice_session):
    """Toggling twice selects then unselects and leaves no row"""
    first = ToggleService.toggle_guest_date(alice_session, "2025-09-05", ResponseMode.UNAVAILABLE, db_session)
    second = ToggleService.toggle_guest_date(alice_session, "2025-09-05", ResponseMode.UNAVAILABLE, db_session)

    assert first is True
    assert second is False
    assert db_session.query(GuestResponse).count() == 0

def test_toggle_stores_month_and_registers_guest(db_session, alice_session):
    """First selection registers the guest with their mode"""
    ToggleService.toggle_guest_date(alice_session, "2025-10-03", ResponseMode.AVAILABLE, db_session)

    response = db_session.query(GuestResponse).one()
    assert response.date == "2025-10-03"
    assert response.month == "2025-10"

    guest = db_session.query(Guest).one()
    assert (guest.first_name, guest.last_name) == ("Alice", "Smith")
    assert guest.response_mode == "available"

def test_guests_are_independent(db_session, alice_session):
    """Another guest toggling the same date does not remove Alice's row"""
    ToggleService.toggle_guest_date(alice_session, "2025-09-05", ResponseMode.UNAVAILABLE, db_session)
    selected = ToggleService.toggle_guest_date(SessionContext(guest=BOB), "2025-09-05", ResponseMode.AVAILABLE, db_session)

    assert selected is True
    assert db_session.query(GuestResponse).count() == 2
    assert ToggleService.list_guest_dates(ALICE, db_session) == ["2025-09-05"]

def test_guest_identity_is_case_sensitive(db_session, alice_session):
    """'alice smith' is a different guest from 'Alice Smith'"""
    ToggleService.toggle_guest_date(alice_session, "2025-09-05", ResponseMode.UNAVAILABLE, db_session)
    lower = SessionContext(guest=GuestIdentity(first_name="alice", last_name="smith"))

    assert ToggleService.toggle_guest_date(lower, "2025-09-05", ResponseMode.UNAVAILABLE, db_session) is True
    assert db_session.query(Guest).count() == 2

def test_toggle_requires_guest(db_session):
    """Guest toggles need an identity in the session"""
    with pytest.raises(GuestIdentityRequired):
        ToggleService.toggle_guest_date(SessionContext(), "2025-09-05", ResponseMode.UNAVAILABLE, db_session)

def test_toggle_accepts_dates_outside_catalog(db_session, alice_session):
    """Catalog checks belong to the routes, not the toggle"""
    assert ToggleService.toggle_guest_date(alice_session, "2025-09-08", ResponseMode.UNAVAILABLE, db_session) is True

def test_mixing_modes_is_rejected(db_session, alice_session):
    """Adding a row under a second mode raises instead of silently mixing"""
    ToggleService.toggle_guest_date(alice_session, "2025-09-05", ResponseMode.UNAVAILABLE, db_session)

    with pytest.raises(InconsistentGuestMode) as exc_info:
        ToggleService.toggle_guest_date(alice_session, "2025-09-06", ResponseMode.AVAILABLE, db_session)

    assert exc_info.value.status_code == 409
    assert exc_info.value.modes == ["available", "unavailable"]
    assert ToggleService.list_guest_dates(ALICE, db_session) == ["2025-09-05"]

def test_removal_ignores_passed_mode(db_session, alice_session):
    """An existing row is removed whatever mode the caller passes"""
    ToggleService.toggle_guest_date(alice_session, "2025-09-05", ResponseMode.UNAVAILABLE, db_session)

    assert ToggleService.toggle_guest_date(alice_session, "2025-09-05", ResponseMode.AVAILABLE, db_session) is False
    assert db_session.query(GuestResponse).count() == 0

def test_new_mode_allowed_once_cleared(db_session, alice_session):
    """With no rows left a guest may start over in the other mode"""
    ToggleService.toggle_guest_date(alice_session, "2025-09-05", ResponseMode.UNAVAILABLE, db_session)
    ToggleService.toggle_guest_date(alice_session, "2025-09-05", ResponseMode.UNAVAILABLE, db_session)

    assert ToggleService.toggle_guest_date(alice_session, "2025-09-06", ResponseMode.AVAILABLE, db_session) is True
    assert db_session.query(Guest).one().response_mode == "available"

def test_switch_response_mode_clears_selections(db_session, alice_session):
    """Switching mode removes every selection and records the new mode"""
    for day in ("2025-09-05", "2025-09-06", "2025-09-07"):
        ToggleService.toggle_guest_date(alice_session, day, ResponseMode.UNAVAILABLE, db_session)
    ToggleService.toggle_guest_date(SessionContext(guest=BOB), "2025-09-05", ResponseMode.UNAVAILABLE, db_session)

    cleared = ToggleService.switch_response_mode(alice_session, ResponseMode.AVAILABLE, db_session)

    assert cleared == 3
    assert ToggleService.list_guest_dates(ALICE, db_session) == []
    assert ToggleService.list_guest_dates(BOB, db_session) == ["2025-09-05"]
    alice = db_session.query(Guest).filter(Guest.first_name == "Alice").one()
    assert alice.response_mode == "available"
    assert ToggleService.toggle_guest_date(alice_session, "2025-09-12", ResponseMode.AVAILABLE, db_session) is True

def test_switch_response_mode_without_selections(db_session, alice_session):
    """Switching before any selection just registers the mode"""
    assert ToggleService.switch_response_mode(alice_session, ResponseMode.AVAILABLE, db_session) == 0
    assert db_session.query(Guest).one().response_mode == "available"

def test_list_guest_dates_sorted(db_session, alice_session):
    """Selections come back in date order"""
    for day in ("2025-11-02", "2025-09-05", "2025-10-03"):
        ToggleService.toggle_guest_date(alice_session, day, ResponseMode.UNAVAILABLE, db_session)

    assert ToggleService.list_guest_dates(ALICE, db_session) == ["2025-09-05", "2025-10-03", "2025-11-02"]

def test_toggle_disabled_date_round_trip(db_session, admin_session):
    """Disabling twice disables then re-enables, leaving the table empty"""
    first = ToggleService.toggle_disabled_date(admin_session, "2025-09-06", db_session)
    assert first is True
    assert ToggleService.list_disabled_dates(db_session) == ["2025-09-06"]

    second = ToggleService.toggle_disabled_date(admin_session, "2025-09-06", db_session)
    assert second is False
    assert db_session.query(DisabledDate).count() == 0

def test_toggle_disabled_date_keeps_reason(db_session, admin_session):
    """The optional reason is stored with the disabled date"""
    ToggleService.toggle_disabled_date(admin_session, "2025-12-26", db_session, reason="Boxing Day")

    row = db_session.query(DisabledDate).one()
    assert row.reason == "Boxing Day"
    assert row.month == "2025-12"

def test_toggle_disabled_date_requires_admin(db_session, alice_session):
    """Guests cannot disable dates"""
    with pytest.raises(AdminRequired):
        ToggleService.toggle_disabled_date(alice_session, "2025-09-06", db_session)

def test_store_failure_becomes_store_unavailable():
    """Database errors surface as StoreUnavailable after a rollback"""
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT 1", {}, Exception("database is locked"))

    with pytest.raises(StoreUnavailable) as exc_info:
        ToggleService.toggle_guest_date(SessionContext(guest=ALICE), "2025-09-05", ResponseMode.UNAVAILABLE, db)

    assert exc_info.value.status_code == 503
    db.rollback.assert_called_once()

def test_failed_insert_leaves_state_unchanged(db_session, alice_session, monkeypatch):
    """A failing commit rolls back, so the guest has no selection afterwards"""
    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", failing_commit)
    with pytest.raises(StoreUnavailable):
        GuestResponseRepo.insert_sql(db_session, ALICE, "2025-09-05", ResponseMode.UNAVAILABLE)
    monkeypatch.undo()

    assert ToggleService.list_guest_dates(ALICE, db_session) == []
