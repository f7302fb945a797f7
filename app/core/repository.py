from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.orm import Query, Session

ModelT = TypeVar("ModelT")


class OwnedRepository(Generic[ModelT]):
    """
    Data access for records owned by a single account.

    Every query goes through ``_scoped()``, so a record owned by another
    account is never read, changed or removed; callers see it as missing.
    """

    model: Type[ModelT]

    def __init__(self, db: Session, owner_id: UUID):
        if owner_id is None:
            raise ValueError("owner_id is required")
        self.db = db
        self.owner_id = owner_id

    def _scoped(self) -> Query:
        return self.db.query(self.model).filter(self.model.user_id == self.owner_id)

    def filter_by(self, **criteria: Any) -> Query:
        return self._scoped().filter_by(**criteria)

    def get(self, record_id: UUID) -> Optional[ModelT]:
        return self._scoped().filter(self.model.id == record_id).first()

    def list(self, *order_by: Any) -> List[ModelT]:
        return self._scoped().order_by(*order_by).all()

    def add(self, **fields: Any) -> ModelT:
        fields["user_id"] = self.owner_id
        record = self.model(**fields)
        self.db.add(record)
        self.db.flush()
        return record

    def update(self, record_id: UUID, fields: Dict[str, Any]) -> Optional[ModelT]:
        record = self.get(record_id)
        if record is None:
            return None
        for field, value in fields.items():
            if field in ("id", "user_id"):
                continue
            setattr(record, field, value)
        self.db.flush()
        return record

    def delete(self, record_id: UUID) -> Optional[ModelT]:
        record = self.get(record_id)
        if record is None:
            return None
        self.db.delete(record)
        self.db.flush()
        return record
