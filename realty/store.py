# realty/store.py
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .db import Base
from .errors import ConstraintViolation, NotFound, StorageError
from .models import Retirable, utcnow
from .services.resolver import RelationshipResolver

log = logging.getLogger("realty.store")

T = TypeVar("T")


class EntityStore:
    """
    Row-level persistence for the catalog kinds.

    Every lookup is scoped to live rows (deleted_at IS NULL) unless the
    caller passes include_deleted=True. Every mutation commits its own
    transaction. Storage failures on reads and writes are rolled back and
    re-raised as ConstraintViolation / StorageError.
    """

    def __init__(self, db: Session, resolver: Optional[RelationshipResolver] = None) -> None:
        self.db = db
        self.resolver = resolver or RelationshipResolver()

    # ---------------- reads ----------------

    def _read(self, kind: type[Base], action: str, run: Callable[[], T]) -> T:
        try:
            return run()
        except SQLAlchemyError as exc:
            self.db.rollback()
            log.error("storage failure on %s.%s", kind.__name__, action, exc_info=True)
            raise StorageError(f"{kind.__name__} {action} failed: {exc}") from exc

    def _select(
        self,
        kind: type[Base],
        *,
        include_deleted: bool,
        relations: Sequence[str],
    ):
        stmt = select(kind)
        if not include_deleted:
            stmt = stmt.where(kind.deleted_at.is_(None))
        if relations:
            stmt = stmt.options(
                *self.resolver.options(kind, relations, include_deleted=include_deleted)
            ).execution_options(populate_existing=True)
        return stmt

    def find_by_id(
        self,
        kind: type[Base],
        entity_id: str,
        *,
        include_deleted: bool = False,
        relations: Sequence[str] = (),
    ):
        stmt = self._select(kind, include_deleted=include_deleted, relations=relations)
        return self._read(kind, "find_by_id", lambda: self.db.scalar(stmt.where(kind.id == entity_id)))

    def find_by_name(
        self,
        kind: type[Retirable],
        name: str,
        *,
        include_deleted: bool = False,
        relations: Sequence[str] = (),
    ):
        stmt = self._select(kind, include_deleted=include_deleted, relations=relations)
        stmt = stmt.where(kind.name == name).order_by(kind.created_at.desc())
        return self._read(kind, "find_by_name", lambda: self.db.scalars(stmt).first())

    def list_all(
        self,
        kind: type[Base],
        relations: Sequence[str] = (),
        *,
        include_deleted: bool = False,
    ) -> list:
        stmt = self._select(kind, include_deleted=include_deleted, relations=relations)
        stmt = stmt.order_by(kind.created_at, kind.id)
        return self._read(kind, "list_all", lambda: list(self.db.scalars(stmt).all()))

    def name_taken(self, kind: type[Retirable], name: str, *, exclude_id: Optional[str] = None) -> bool:
        stmt = select(kind.id).where(kind.name == name, kind.deleted_at.is_(None))
        if exclude_id is not None:
            stmt = stmt.where(kind.id != exclude_id)
        return self._read(kind, "name_taken", lambda: self.db.scalar(stmt.limit(1))) is not None

    def list_half_retired(self, kind: type[Retirable]) -> list:
        stmt = select(kind).where(
            kind.retired_name.is_not(None),
            kind.name == kind.retired_name,
            kind.deleted_at.is_(None),
        ).order_by(kind.updated_at)
        return self._read(kind, "list_half_retired", lambda: list(self.db.scalars(stmt).all()))

    # ---------------- writes ----------------

    def _commit(self, kind: type[Base], action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            log.warning("constraint violation on %s.%s: %s", kind.__name__, action, exc.orig)
            raise ConstraintViolation(f"{kind.__name__} {action} violates a storage constraint: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            log.error("storage failure on %s.%s", kind.__name__, action, exc_info=True)
            raise StorageError(f"{kind.__name__} {action} failed: {exc}") from exc

    def _must_get_live(self, kind: type[Base], entity_id: str):
        row = self.find_by_id(kind, entity_id)
        if row is None:
            raise NotFound(kind.__name__, entity_id)
        return row

    def insert(self, kind: type[Base], fields: Mapping[str, Any]):
        row = kind(**dict(fields))
        self.db.add(row)
        self._commit(kind, "insert")
        self.db.refresh(row)
        return row

    def apply_patch(self, kind: type[Base], entity_id: str, fields: Mapping[str, Any]):
        row = self._must_get_live(kind, entity_id)
        for k, v in fields.items():
            setattr(row, k, v)
        self.db.add(row)
        self._commit(kind, "update")
        self.db.refresh(row)
        return row

    def rename(self, kind: type[Retirable], entity_id: str, new_name: str):
        """First soft-delete step: move the row off its name and remember the mutation."""
        row = self._must_get_live(kind, entity_id)
        row.name = new_name
        row.retired_name = new_name
        self.db.add(row)
        self._commit(kind, "rename")
        self.db.refresh(row)
        return row

    def mark_deleted(self, kind: type[Base], entity_id: str) -> None:
        row = self.find_by_id(kind, entity_id, include_deleted=True)
        if row is None:
            raise NotFound(kind.__name__, entity_id)
        if row.deleted_at is not None:
            return

        row.deleted_at = utcnow()
        self.db.add(row)
        self._commit(kind, "mark_deleted")
