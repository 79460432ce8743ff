# truekind/services/base.py
from truekind.domain.errors import InvalidRequest, NotFound
from truekind.utils.logging import get_logger

logger = get_logger(__name__)

# filter value selecting rows where the column IS NULL
NULL = "null"


def eq_filter(column, value):
    if value is None:
        return None
    if value == NULL:
        return column.is_(None)
    return column == value


def build_filters(*pairs) -> list:
    """[(column, value), ...] -> WHERE clauses, skipping absent values."""
    clauses = []
    for column, value in pairs:
        clause = eq_filter(column, value)
        if clause is not None:
            clauses.append(clause)
    return clauses


def require_changes(changes: dict) -> dict:
    if not changes:
        raise InvalidRequest("No fields provided to update", "NO_UPDATES")
    return changes


class CrudService:
    """get / delete shared by every resource service; create and update stay resource specific."""

    repo_class = None
    out_schema = None
    not_found = ("Record not found", "NOT_FOUND")
    deleted_name = "Record"

    def __init__(self, db):
        self.db = db
        self.repo = self.repo_class(db)

    def get(self, obj_id: int):
        obj = self.repo.get(obj_id)
        if not obj:
            raise NotFound(*self.not_found)
        return obj

    def require_reference(self, repo, obj_id: int | None, message: str, code: str):
        if obj_id is None:
            return None
        obj = repo.get(obj_id)
        if not obj:
            raise NotFound(message, code)
        return obj

    def check_delete(self, obj, user=None):
        """Raise when referential blockers exist."""

    def remove(self, obj):
        self.repo.delete(obj)

    def delete(self, obj_id: int, user=None):
        obj = self.get(obj_id)
        self.check_delete(obj, user)
        # serialized before the row disappears
        snapshot = self.out_schema.model_validate(obj)
        self.remove(obj)
        logger.info(f"{self.deleted_name} {obj_id} deleted")
        return snapshot
