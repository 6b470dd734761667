"""
SQLAlchemy implementation of the Base Repository.
Rows are exchanged as plain documents (dicts) keyed by column name.
"""

import uuid
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from gabonshop.domain.repositories.base import BaseRepository
from gabonshop.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


def new_document_id() -> str:
    return uuid.uuid4().hex


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model
        self.primary_key = self.model.__mapper__.primary_key[0].key

    def _known_fields(self, obj_in: Dict[str, Any]) -> Dict[str, Any]:
        # Unknown keys are dropped, the way a schemaless store would ignore them on read
        columns = self.model.__table__.columns.keys()
        return {k: v for k, v in obj_in.items() if k in columns}

    def to_document(self, db_obj: ModelType) -> Dict[str, Any]:
        """Column values of a row, leaving out the ones never written."""
        doc = {}
        for column in self.model.__table__.columns:
            value = getattr(db_obj, column.key)
            if value is not None:
                doc[column.key] = value
        doc["id"] = getattr(db_obj, self.primary_key)
        return doc

    def get_by_id(self, id: str) -> Optional[ModelType]:
        return self.db.get(self.model, id)

    def list(self, order_by: Optional[str] = None, descending: bool = False) -> List[ModelType]:
        query = self.db.query(self.model)
        if order_by:
            column = getattr(self.model, order_by)
            query = query.order_by(column.desc() if descending else column.asc())
        return query.all()

    def create(self, obj_in: Dict[str, Any]) -> ModelType:
        obj_data = self._known_fields(obj_in)
        obj_data.setdefault(self.primary_key, new_document_id())

        db_obj = self.model(**obj_data)
        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def upsert(self, id: str, obj_in: Dict[str, Any]) -> ModelType:
        existing = self.get_by_id(id)
        if existing is not None:
            self.db.delete(existing)
            self.db.flush()
        return self.create({**obj_in, self.primary_key: id})

    def update(self, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        for field, value in self._known_fields(obj_in).items():
            if field != self.primary_key:
                setattr(db_obj, field, value)

        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, id: str) -> Optional[ModelType]:
        obj = self.get_by_id(id)
        if obj:
            self.db.delete(obj)
            self.db.commit()
        return obj
