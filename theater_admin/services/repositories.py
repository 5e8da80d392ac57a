"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

Repositories hand out schema objects so services and calculators never see
ORM rows or Firestore snapshots. SQL rows use snake_case columns; Firestore
documents keep the camelCase field names the booking front end writes.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from theater_admin.core.config import settings
from theater_admin.models import Reservation as ReservationRow
from theater_admin.models import Show as ShowRow
from theater_admin.models import WaitingListEntry as WaitingListRow
from theater_admin.schemas.reservation import Reservation
from theater_admin.schemas.show import ShowEvent
from theater_admin.schemas.waitlist import WaitingListEntry
from theater_admin.services import firebase_client
from theater_admin.services.firebase_client import doc_to_dict, get_firestore_client


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


def new_id() -> str:
    return uuid.uuid4().hex


class _Repo:
    """Shared CRUD for one collection/table"""

    row: Type = None
    schema: Type[BaseModel] = None
    collection: str = ""
    order_by: str = "date"

    def __init__(self, db: Optional[Session] = None):
        self.db = db
        self.fs = get_firestore_client() if use_firestore() else None

    # -- conversions --

    def _from_row(self, row) -> BaseModel:
        return self.schema.model_validate(row)

    def _from_doc(self, doc) -> BaseModel:
        return self.schema.model_validate(doc_to_dict(doc))

    def _fs_collection(self):
        return self.fs.collection(self.collection)

    # -- reads --

    def list_all(self) -> List[Any]:
        if self.fs is not None:
            docs = self._fs_collection().order_by(to_camel(self.order_by)).get()
            return [self._from_doc(d) for d in docs]
        rows = self.db.query(self.row).order_by(getattr(self.row, self.order_by)).all()
        return [self._from_row(r) for r in rows]

    def list_where(self, field: str, value: Any) -> List[Any]:
        if self.fs is not None:
            docs = self._fs_collection().where(to_camel(field), "==", value).get()
            return [self._from_doc(d) for d in docs]
        rows = self.db.query(self.row).filter(getattr(self.row, field) == value).all()
        return [self._from_row(r) for r in rows]

    def list_between(self, start_date: str, end_date: str) -> List[Any]:
        """Records whose ISO date falls in [start_date, end_date]"""
        if self.fs is not None:
            docs = (
                self._fs_collection()
                .where("date", ">=", start_date)
                .where("date", "<=", end_date)
                .get()
            )
            return sorted((self._from_doc(d) for d in docs), key=lambda item: item.date)
        rows = (
            self.db.query(self.row)
            .filter(self.row.date >= start_date, self.row.date <= end_date)
            .order_by(self.row.date)
            .all()
        )
        return [self._from_row(r) for r in rows]

    def list_by_date(self, date: str) -> List[Any]:
        return self.list_where("date", date)

    def get(self, item_id: str) -> Optional[Any]:
        if self.fs is not None:
            doc = self._fs_collection().document(item_id).get()
            return self._from_doc(doc) if doc.exists else None
        row = self.db.query(self.row).filter(self.row.id == item_id).first()
        return self._from_row(row) if row else None

    # -- writes --

    def add(self, item: BaseModel) -> Any:
        if self.fs is not None:
            data = item.model_dump(by_alias=True, exclude={"id"})
            self._fs_collection().document(item.id).set(data)
            return item
        row = self.row(**item.model_dump())
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return self._from_row(row)

    def update(self, item_id: str, changes: Dict[str, Any]) -> Optional[Any]:
        if self.fs is not None:
            ref = self._fs_collection().document(item_id)
            if not ref.get().exists:
                return None
            ref.set({to_camel(k): v for k, v in changes.items()}, merge=True)
            return self.get(item_id)
        row = self.db.query(self.row).filter(self.row.id == item_id).first()
        if not row:
            return None
        for field, value in changes.items():
            setattr(row, field, value)
        self.db.commit()
        self.db.refresh(row)
        return self._from_row(row)

    def delete(self, item_id: str) -> bool:
        if self.fs is not None:
            ref = self._fs_collection().document(item_id)
            if not ref.get().exists:
                return False
            ref.delete()
            return True
        deleted = self.db.query(self.row).filter(self.row.id == item_id).delete()
        self.db.commit()
        return deleted > 0

    def delete_many(self, item_ids: List[str]) -> int:
        if not item_ids:
            return 0
        if self.fs is not None:
            batch = self.fs.batch()
            for item_id in item_ids:
                batch.delete(self._fs_collection().document(item_id))
            batch.commit()
            return len(item_ids)
        deleted = (
            self.db.query(self.row)
            .filter(self.row.id.in_(item_ids))
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted


# -------- Show repository --------

class ShowRepo(_Repo):
    row = ShowRow
    schema = ShowEvent
    collection = firebase_client.SHOWS

    def get_by_date(self, date: str) -> Optional[ShowEvent]:
        shows = self.list_by_date(date)
        return shows[0] if shows else None


# -------- Reservation repository --------

class ReservationRepo(_Repo):
    row = ReservationRow
    schema = Reservation
    collection = firebase_client.RESERVATIONS


# -------- Waiting list repository --------

class WaitingListRepo(_Repo):
    row = WaitingListRow
    schema = WaitingListEntry
    collection = firebase_client.WAITING_LIST
    order_by = "added_at"
