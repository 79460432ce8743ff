# truekind/repos/base.py
from contextlib import contextmanager

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from truekind.domain.errors import Conflict
from truekind.utils.logging import get_logger

logger = get_logger(__name__)


class BaseRepo:
    """
    Shared persistence for one table.

    Uniqueness is left to the database. A violated unique constraint is rolled
    back and raised as Conflict with the code registered for that column.
    """

    model = None
    label = "Record"
    # column name -> error code
    unique_codes: dict[str, str] = {}
    search_columns: tuple[str, ...] = ()
    # api sort key -> column name
    sort_columns: dict[str, str] = {"createdAt": "created_at"}
    default_sort = ("created_at", "desc")

    def __init__(self, db: Session):
        self.db = db

    # transactions
    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def flush(self):
        with self.translate_integrity_errors():
            self.db.flush()

    @contextmanager
    def translate_integrity_errors(self):
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            raise self._conflict(e) from e

    def _conflict(self, error: IntegrityError) -> Conflict:
        message = str(error.orig)
        table = self.model.__tablename__
        for column, code in self.unique_codes.items():
            if f"{table}.{column}" in message or f"uq_{table}_{column}" in message:
                logger.info(f"Unique constraint on {table}.{column} rejected a write ({code})")
                return Conflict(f"{self.label} with this {column.replace('_', ' ')} already exists", code)
        logger.warning(f"Integrity error on {table}: {message}")
        return Conflict(f"{self.label} violates a database constraint", "CONSTRAINT_VIOLATION")

    # reads
    def get(self, obj_id: int):
        return self.db.get(self.model, obj_id)

    def list(self, filters=(), search: str | None = None, sort: str | None = None,
             order: str | None = None, limit: int = 10, offset: int = 0):
        stmt = select(self.model).where(*filters)
        if search:
            stmt = stmt.where(self.search_clause(search))
        stmt = stmt.order_by(*self.ordering(sort, order)).limit(limit).offset(offset)
        return self.db.execute(stmt).scalars().unique().all()

    def search_clause(self, search: str):
        pattern = f"%{search}%"
        return or_(*[getattr(self.model, name).ilike(pattern) for name in self.search_columns])

    def ordering(self, sort: str | None, order: str | None):
        column_name = self.sort_columns.get(sort) if sort else None
        direction = order
        if column_name is None:
            column_name, default_direction = self.default_sort
            direction = direction or default_direction
        column = getattr(self.model, column_name)
        primary = column.asc() if direction == "asc" else column.desc()
        # stable pages for equal sort keys
        return primary, self.model.id.asc()

    # writes
    def add(self, obj):
        with self.translate_integrity_errors():
            self.db.add(obj)
            self.db.commit()
        self.db.refresh(obj)
        return obj

    def update(self, obj, changes: dict):
        for key, value in changes.items():
            setattr(obj, key, value)
        with self.translate_integrity_errors():
            self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj):
        with self.translate_integrity_errors():
            self.db.delete(obj)
            self.db.commit()
