"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

Both backends hand back plain records so the availability services never see
ORM objects or Firestore snapshots. Any backend failure is re-raised as
StoreUnavailable; SQL sessions are rolled back first so a failed write leaves
nothing behind.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from google.api_core.exceptions import GoogleAPIError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wedding_dates.core.config import settings
from wedding_dates.core.exceptions import InconsistentGuestMode, StoreUnavailable
from wedding_dates.models import DisabledDate, Guest, GuestResponse
from wedding_dates.schemas.guest import GuestIdentity, ResponseMode
from wedding_dates.services.date_catalog import month_key
from wedding_dates.services.firebase_client import (
    DISABLED_DATES_COLLECTION,
    RESPONSES_COLLECTION,
    get_firestore_client,
)

logger = logging.getLogger(__name__)

RecordId = Union[int, str]


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


@dataclass(frozen=True)
class ResponseRecord:
    id: RecordId
    first_name: str
    last_name: str
    date: str
    response_mode: ResponseMode

    @property
    def guest(self) -> GuestIdentity:
        # names were validated on the way in; stored values are taken as-is
        return GuestIdentity.model_construct(first_name=self.first_name, last_name=self.last_name)


@dataclass(frozen=True)
class DisabledDateRecord:
    id: RecordId
    date: str
    reason: Optional[str] = None


@contextmanager
def sql_store(db: Session, action: str):
    """Map SQLAlchemy failures to StoreUnavailable, rolling back the session"""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error while trying to {action}: {e}")
        raise StoreUnavailable() from e


@contextmanager
def firestore_store(action: str):
    """Map Firestore client failures to StoreUnavailable"""
    try:
        yield
    except GoogleAPIError as e:
        logger.error(f"Firestore error while trying to {action}: {e}")
        raise StoreUnavailable() from e


def _fs():
    fs = get_firestore_client()
    if fs is None:
        raise StoreUnavailable("Firestore is not configured")
    return fs


# -------- Guest response repository --------

class GuestResponseRepo:
    @staticmethod
    def _record_sql(response: GuestResponse) -> ResponseRecord:
        return ResponseRecord(
            id=response.id,
            first_name=response.guest.first_name,
            last_name=response.guest.last_name,
            date=response.date,
            response_mode=ResponseMode(response.guest.response_mode),
        )

    @staticmethod
    def _get_guest_sql(db: Session, guest: GuestIdentity) -> Optional[Guest]:
        return db.query(Guest).filter(
            Guest.first_name == guest.first_name,
            Guest.last_name == guest.last_name,
        ).first()

    @staticmethod
    def find_sql(db: Session, guest: GuestIdentity, date: str) -> Optional[ResponseRecord]:
        with sql_store(db, "look up a response"):
            response = db.query(GuestResponse).join(Guest).filter(
                Guest.first_name == guest.first_name,
                Guest.last_name == guest.last_name,
                GuestResponse.date == date,
            ).first()
            return GuestResponseRepo._record_sql(response) if response else None

    @staticmethod
    def list_for_guest_sql(db: Session, guest: GuestIdentity) -> List[ResponseRecord]:
        with sql_store(db, "list guest responses"):
            responses = db.query(GuestResponse).join(Guest).filter(
                Guest.first_name == guest.first_name,
                Guest.last_name == guest.last_name,
            ).order_by(GuestResponse.date).all()
            return [GuestResponseRepo._record_sql(r) for r in responses]

    @staticmethod
    def list_all_sql(db: Session) -> List[ResponseRecord]:
        with sql_store(db, "list responses"):
            responses = db.query(GuestResponse).join(Guest).order_by(GuestResponse.id).all()
            return [GuestResponseRepo._record_sql(r) for r in responses]

    @staticmethod
    def insert_sql(db: Session, guest: GuestIdentity, date: str, mode: ResponseMode) -> ResponseRecord:
        with sql_store(db, "insert a response"):
            registered = GuestResponseRepo._get_guest_sql(db, guest)
            if registered is None:
                registered = Guest(
                    first_name=guest.first_name,
                    last_name=guest.last_name,
                    response_mode=mode.value,
                )
                db.add(registered)
                db.flush()
            elif registered.response_mode != mode.value:
                if registered.responses:
                    raise InconsistentGuestMode(guest.first_name, guest.last_name, {registered.response_mode, mode.value})
                # no rows left under the old mode, so the guest may start over
                registered.response_mode = mode.value

            response = GuestResponse(guest_id=registered.id, date=date, month=month_key(date))
            db.add(response)
            db.commit()
            db.refresh(response)
            return GuestResponseRepo._record_sql(response)

    @staticmethod
    def delete_sql(db: Session, record_id: RecordId) -> None:
        with sql_store(db, "delete a response"):
            db.query(GuestResponse).filter(GuestResponse.id == record_id).delete()
            db.commit()

    @staticmethod
    def set_mode_sql(db: Session, guest: GuestIdentity, mode: ResponseMode) -> None:
        with sql_store(db, "record a response mode"):
            registered = GuestResponseRepo._get_guest_sql(db, guest)
            if registered is None:
                db.add(Guest(first_name=guest.first_name, last_name=guest.last_name, response_mode=mode.value))
            else:
                registered.response_mode = mode.value
                registered.updated_at = datetime.utcnow()
            db.commit()

    # Firestore shape: flat collection "guestResponses", one document per (guest, date)
    # keyed "first|last|date"
    @staticmethod
    def _record_fs(doc) -> ResponseRecord:
        data = doc.to_dict()
        return ResponseRecord(
            id=doc.id,
            first_name=data["first_name"],
            last_name=data["last_name"],
            date=data["date"],
            response_mode=ResponseMode(data.get("response_mode") or ResponseMode.UNAVAILABLE.value),
        )

    @staticmethod
    def _guest_query_fs(guest: GuestIdentity):
        return _fs().collection(RESPONSES_COLLECTION).where(
            "first_name", "==", guest.first_name
        ).where("last_name", "==", guest.last_name)

    @staticmethod
    def find_fs(guest: GuestIdentity, date: str) -> Optional[ResponseRecord]:
        with firestore_store("look up a response"):
            docs = GuestResponseRepo._guest_query_fs(guest).where("date", "==", date).get()
            return GuestResponseRepo._record_fs(docs[0]) if docs else None

    @staticmethod
    def list_for_guest_fs(guest: GuestIdentity) -> List[ResponseRecord]:
        with firestore_store("list guest responses"):
            docs = GuestResponseRepo._guest_query_fs(guest).get()
            return sorted((GuestResponseRepo._record_fs(d) for d in docs), key=lambda r: r.date)

    @staticmethod
    def list_all_fs() -> List[ResponseRecord]:
        with firestore_store("list responses"):
            docs = _fs().collection(RESPONSES_COLLECTION).get()
            return [GuestResponseRepo._record_fs(d) for d in docs]

    @staticmethod
    def _doc_id_fs(guest: GuestIdentity, date: str) -> str:
        # "/" is a path separator in Firestore document ids
        return "|".join((guest.first_name, guest.last_name, date)).replace("/", "_")

    @staticmethod
    def insert_fs(guest: GuestIdentity, date: str, mode: ResponseMode) -> ResponseRecord:
        doc_id = GuestResponseRepo._doc_id_fs(guest, date)
        data: Dict[str, Any] = {
            "first_name": guest.first_name,
            "last_name": guest.last_name,
            "date": date,
            "month": month_key(date),
            "response_mode": mode.value,
            "created_at": datetime.utcnow().isoformat(),
        }
        with firestore_store("insert a response"):
            _fs().collection(RESPONSES_COLLECTION).document(doc_id).set(data)
        return ResponseRecord(id=doc_id, first_name=guest.first_name, last_name=guest.last_name, date=date, response_mode=mode)

    @staticmethod
    def delete_fs(record_id: RecordId) -> None:
        with firestore_store("delete a response"):
            _fs().collection(RESPONSES_COLLECTION).document(str(record_id)).delete()

    # Backend dispatch
    @staticmethod
    def find(db: Session, guest: GuestIdentity, date: str) -> Optional[ResponseRecord]:
        if use_firestore():
            return GuestResponseRepo.find_fs(guest, date)
        return GuestResponseRepo.find_sql(db, guest, date)

    @staticmethod
    def list_for_guest(db: Session, guest: GuestIdentity) -> List[ResponseRecord]:
        if use_firestore():
            return GuestResponseRepo.list_for_guest_fs(guest)
        return GuestResponseRepo.list_for_guest_sql(db, guest)

    @staticmethod
    def list_all(db: Session) -> List[ResponseRecord]:
        if use_firestore():
            return GuestResponseRepo.list_all_fs()
        return GuestResponseRepo.list_all_sql(db)

    @staticmethod
    def insert(db: Session, guest: GuestIdentity, date: str, mode: ResponseMode) -> ResponseRecord:
        if use_firestore():
            return GuestResponseRepo.insert_fs(guest, date, mode)
        return GuestResponseRepo.insert_sql(db, guest, date, mode)

    @staticmethod
    def delete(db: Session, record_id: RecordId) -> None:
        if use_firestore():
            GuestResponseRepo.delete_fs(record_id)
        else:
            GuestResponseRepo.delete_sql(db, record_id)

    @staticmethod
    def set_mode(db: Session, guest: GuestIdentity, mode: ResponseMode) -> None:
        # Firestore documents carry the mode themselves
        if not use_firestore():
            GuestResponseRepo.set_mode_sql(db, guest, mode)


# -------- Disabled date repository --------

class DisabledDateRepo:
    @staticmethod
    def find_sql(db: Session, date: str) -> Optional[DisabledDateRecord]:
        with sql_store(db, "look up a disabled date"):
            row = db.query(DisabledDate).filter(DisabledDate.date == date).first()
            return DisabledDateRecord(id=row.id, date=row.date, reason=row.reason) if row else None

    @staticmethod
    def list_all_sql(db: Session) -> List[DisabledDateRecord]:
        with sql_store(db, "list disabled dates"):
            rows = db.query(DisabledDate).order_by(DisabledDate.date).all()
            return [DisabledDateRecord(id=r.id, date=r.date, reason=r.reason) for r in rows]

    @staticmethod
    def insert_sql(db: Session, date: str, reason: Optional[str] = None) -> DisabledDateRecord:
        with sql_store(db, "disable a date"):
            row = DisabledDate(date=date, month=month_key(date), reason=reason)
            db.add(row)
            db.commit()
            db.refresh(row)
            return DisabledDateRecord(id=row.id, date=row.date, reason=row.reason)

    @staticmethod
    def delete_sql(db: Session, record_id: RecordId) -> None:
        with sql_store(db, "enable a date"):
            db.query(DisabledDate).filter(DisabledDate.id == record_id).delete()
            db.commit()

    # Firestore disabled dates live under "disabledDates/{date}"
    @staticmethod
    def find_fs(date: str) -> Optional[DisabledDateRecord]:
        with firestore_store("look up a disabled date"):
            doc = _fs().collection(DISABLED_DATES_COLLECTION).document(date).get()
            if not doc.exists:
                return None
            return DisabledDateRecord(id=doc.id, date=date, reason=doc.to_dict().get("reason"))

    @staticmethod
    def list_all_fs() -> List[DisabledDateRecord]:
        with firestore_store("list disabled dates"):
            docs = _fs().collection(DISABLED_DATES_COLLECTION).get()
            records = [DisabledDateRecord(id=d.id, date=d.to_dict()["date"], reason=d.to_dict().get("reason")) for d in docs]
        return sorted(records, key=lambda r: r.date)

    @staticmethod
    def insert_fs(date: str, reason: Optional[str] = None) -> DisabledDateRecord:
        with firestore_store("disable a date"):
            _fs().collection(DISABLED_DATES_COLLECTION).document(date).set({
                "date": date,
                "month": month_key(date),
                "reason": reason,
                "created_at": datetime.utcnow().isoformat(),
            })
        return DisabledDateRecord(id=date, date=date, reason=reason)

    @staticmethod
    def delete_fs(record_id: RecordId) -> None:
        with firestore_store("enable a date"):
            _fs().collection(DISABLED_DATES_COLLECTION).document(str(record_id)).delete()

    # Backend dispatch
    @staticmethod
    def find(db: Session, date: str) -> Optional[DisabledDateRecord]:
        if use_firestore():
            return DisabledDateRepo.find_fs(date)
        return DisabledDateRepo.find_sql(db, date)

    @staticmethod
    def list_all(db: Session) -> List[DisabledDateRecord]:
        if use_firestore():
            return DisabledDateRepo.list_all_fs()
        return DisabledDateRepo.list_all_sql(db)

    @staticmethod
    def insert(db: Session, date: str, reason: Optional[str] = None) -> DisabledDateRecord:
        if use_firestore():
            return DisabledDateRepo.insert_fs(date, reason)
        return DisabledDateRepo.insert_sql(db, date, reason)

    @staticmethod
    def delete(db: Session, record_id: RecordId) -> None:
        if use_firestore():
            DisabledDateRepo.delete_fs(record_id)
        else:
            DisabledDateRepo.delete_sql(db, record_id)
