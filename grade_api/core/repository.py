from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from grade_api.core.errors import ConstraintViolation
from grade_api.models.student import StudentRecord
from grade_api.models.upload_history import UploadHistory


class Repository:
    """Storage operations for one mapped model.

    Writes are flushed but never committed here; the caller owns the
    transaction. Unique-key failures surface as ``ConstraintViolation``.
    """

    def __init__(self, model):
        self.model = model

    def _column(self, field: str):
        column = getattr(self.model, field, None)
        if column is None:
            raise AttributeError(f"{self.model.__name__} has no field {field!r}")
        return column

    def _flush(self, db: Session) -> None:
        try:
            db.flush()
        except IntegrityError as exc:
            db.rollback()
            raise ConstraintViolation(str(exc.orig)) from exc

    def insert_many(self, db: Session, records: Iterable[dict[str, Any]]) -> list:
        items = [self.model(**record) for record in records]
        db.add_all(items)
        self._flush(db)
        return items

    def create(self, db: Session, **fields):
        item = self.model(**fields)
        db.add(item)
        self._flush(db)
        return item

    def delete_all(self, db: Session) -> int:
        return db.query(self.model).delete(synchronize_session=False)

    def find_all_sorted(self, db: Session, field: str, descending: bool = True) -> list:
        return self._sorted(db, field, descending).all()

    def find_limited(self, db: Session, field: str, limit: int, descending: bool = True) -> list:
        return self._sorted(db, field, descending).limit(limit).all()

    def _sorted(self, db: Session, field: str, descending: bool):
        column = self._column(field)
        # id breaks ties between rows written in the same instant
        if descending:
            return db.query(self.model).order_by(column.desc(), self.model.id.desc())
        return db.query(self.model).order_by(column.asc(), self.model.id.asc())

    def get(self, db: Session, item_id: int):
        return db.get(self.model, item_id)

    def update_by_id(self, db: Session, item_id: int, patch: dict[str, Any]):
        item = db.get(self.model, item_id)
        if item is None:
            return None
        for field, value in patch.items():
            self._column(field)
            setattr(item, field, value)
        self._flush(db)
        return item

    def delete_by_id(self, db: Session, item_id: int) -> bool:
        item = db.get(self.model, item_id)
        if item is None:
            return False
        db.delete(item)
        db.flush()
        return True


students = Repository(StudentRecord)
upload_history = Repository(UploadHistory)
