"""
Repository Layer - Document Collection Interface

One DocumentRepository per collection table. Callers work with plain dicts
(the document body); the repository handles SQLAlchemy, JSON path filters
and the store-set timestamps.

Store errors are not caught here: they propagate to the API error handler.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from .models import Document, generate_id

logger = logging.getLogger(__name__)

# (field, descending). "createdAt" / "updatedAt" sort on the timestamp
# columns; any other field sorts on its integer JSON value.
OrderSpec = Sequence[Tuple[str, bool]]

NEWEST_FIRST: OrderSpec = (("createdAt", True),)

# Body keys owned by the store
RESERVED_FIELDS = frozenset({"id", "_id", "createdAt", "updatedAt"})


def strip_reserved(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys the client may not write."""
    return {k: v for k, v in data.items() if k not in RESERVED_FIELDS}


class DocumentRepository:
    """CRUD and simple aggregates over one collection."""

    def __init__(self, db: Session, model: Type[Document]):
        self.db = db
        self.model = model

    # =========================================================================
    # Query helpers
    # =========================================================================

    def _json_field(self, field: str, value: Any = None):
        """JSON path expression typed after the value it is compared with."""
        element = self.model.data[field]
        if isinstance(value, bool):
            return element.as_boolean()
        if isinstance(value, int):
            return element.as_integer()
        return element.as_string()

    def _order_clauses(self, order: OrderSpec):
        clauses = []
        for field, descending in order:
            if field == "createdAt":
                column = self.model.created_at
            elif field == "updatedAt":
                column = self.model.updated_at
            else:
                column = self.model.data[field].as_integer()
            clauses.append(column.desc() if descending else column.asc())
        return clauses

    def _filtered(self, filters: Optional[Dict[str, Any]]):
        stmt = select(self.model)
        for field, value in (filters or {}).items():
            stmt = stmt.where(self._json_field(field, value) == value)
        return stmt

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, doc_id: str) -> Optional[Document]:
        if not doc_id:
            return None
        return self.db.get(self.model, doc_id)

    def find(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order: OrderSpec = NEWEST_FIRST,
    ) -> List[Document]:
        """All documents whose JSON fields equal ``filters``, in ``order``."""
        stmt = self._filtered(filters).order_by(*self._order_clauses(order))
        return list(self.db.execute(stmt).scalars().all())

    def first(self, order: OrderSpec = NEWEST_FIRST) -> Optional[Document]:
        stmt = select(self.model).order_by(*self._order_clauses(order)).limit(1)
        return self.db.execute(stmt).scalars().first()

    def distinct(self, field: str) -> List[Any]:
        """Sorted distinct non-null values of a string field."""
        element = self.model.data[field].as_string()
        stmt = select(element).where(element.isnot(None)).distinct()
        values = [row[0] for row in self.db.execute(stmt).all()]
        return sorted(v for v in values if v is not None)

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = select(func.count()).select_from(self._filtered(filters).subquery())
        return self.db.execute(stmt).scalar() or 0

    def group_count(self, field: str) -> List[Dict[str, Any]]:
        """``[{"_id": value, "count": n}]`` grouped on a string field."""
        element = self.model.data[field].as_string()
        stmt = (
            select(element.label("value"), func.count().label("count"))
            .group_by(element)
            .order_by(func.count().desc(), element)
        )
        return [
            {"_id": row.value, "count": row.count}
            for row in self.db.execute(stmt).all()
        ]

    def sum(self, field: str) -> int:
        stmt = select(func.coalesce(func.sum(self.model.data[field].as_integer()), 0))
        return int(self.db.execute(stmt).scalar() or 0)

    # =========================================================================
    # Writes
    # =========================================================================

    def insert(self, data: Dict[str, Any]) -> Document:
        now = datetime.utcnow()
        doc = self.model(
            id=generate_id(),
            data=strip_reserved(data),
            created_at=now,
            updated_at=now,
        )
        self.db.add(doc)
        self.db.commit()
        logger.debug(f"Inserted {self.model.__tablename__}/{doc.id}")
        return doc

    def save(self, doc: Document, data: Dict[str, Any]) -> Document:
        """Replace the document body."""
        doc.data = strip_reserved(data)
        flag_modified(doc, "data")
        doc.updated_at = datetime.utcnow()
        self.db.commit()
        return doc

    def set_field(self, doc: Document, field: str, value: Any) -> Document:
        body = dict(doc.data or {})
        body[field] = value
        return self.save(doc, body)

    def delete(self, doc: Document) -> None:
        self.db.delete(doc)
        self.db.commit()
        logger.debug(f"Deleted {self.model.__tablename__}/{doc.id}")
