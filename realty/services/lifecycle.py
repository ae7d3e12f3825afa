# realty/services/lifecycle.py
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Mapping, Optional, Sequence

from ..config import settings
from ..db import Base
from ..errors import (
    CatalogError,
    DuplicateName,
    NotFound,
    ParentNotFound,
    PartialFailure,
    UnsupportedOperation,
)
from ..models import NAMED_KINDS, PARENTS, Retirable, Support
from ..store import EntityStore

log = logging.getLogger("realty.lifecycle")

STEP_RENAME = "rename"
STEP_MARK_DELETED = "mark_deleted"


class MillisClock:
    """
    Epoch-millisecond source for retired-name suffixes.

    Never hands out the same value twice within the process, so two
    delete/recreate cycles inside one millisecond still get distinct names.
    """

    def __init__(self, now: Callable[[], float] = time.time) -> None:
        self._now = now
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            ms = int(self._now() * 1000)
            if ms <= self._last:
                ms = self._last + 1
            self._last = ms
            return ms


_process_clock = MillisClock()


def _is_named(kind: type[Base]) -> bool:
    return kind in NAMED_KINDS


class LifecycleManager:
    """
    Business operations per entity kind on top of an EntityStore.

    Soft delete of a named kind is two steps:
      1) rename to "{name}{marker}{epoch_ms}" and record retired_name
      2) set deleted_at
    A row left between the two (renamed, still live) is picked up again by
    soft_delete() or resume_pending_deletes(), which only run step 2.
    """

    def __init__(
        self,
        store: EntityStore,
        *,
        clock: Optional[Callable[[], int]] = None,
        marker: Optional[str] = None,
    ) -> None:
        self.store = store
        self.clock = clock or _process_clock
        self.marker = settings.retired_name_marker if marker is None else marker

    # ---------------- reads ----------------

    def get(
        self,
        kind: type[Base],
        entity_id: str,
        *,
        relations: Sequence[str] = (),
        include_deleted: bool = False,
    ):
        row = self.store.find_by_id(kind, entity_id, include_deleted=include_deleted, relations=relations)
        if row is None:
            raise NotFound(kind.__name__, entity_id)
        return row

    def get_by_name(
        self,
        kind: type[Retirable],
        name: str,
        *,
        relations: Sequence[str] = (),
        include_deleted: bool = False,
    ):
        if not _is_named(kind):
            raise UnsupportedOperation(f"{kind.__name__} has no name to look up")
        row = self.store.find_by_name(kind, name, include_deleted=include_deleted, relations=relations)
        if row is None:
            raise NotFound(kind.__name__, name, field="name")
        return row

    def list_all(self, kind: type[Base], *, relations: Sequence[str] = (), include_deleted: bool = False) -> list:
        return self.store.list_all(kind, relations, include_deleted=include_deleted)

    # ---------------- writes ----------------

    def _ensure_parent(self, kind: type[Base], fields: Mapping[str, Any]) -> None:
        if kind not in PARENTS:
            return
        fk_attr, parent_kind = PARENTS[kind]
        parent_id = fields.get(fk_attr)
        if parent_id is None or self.store.find_by_id(parent_kind, parent_id) is None:
            raise ParentNotFound(parent_kind.__name__, str(parent_id))

    def create(self, kind: type[Base], fields: Mapping[str, Any]):
        self._ensure_parent(kind, fields)
        if _is_named(kind) and self.store.name_taken(kind, fields["name"]):
            raise DuplicateName(kind.__name__, fields["name"])

        row = self.store.insert(kind, fields)
        log.info(
            "created %s %s",
            kind.__name__,
            row.id,
            extra={"entity_kind": kind.__name__, "entity_id": row.id},
        )
        return row

    def update(self, kind: type[Base], entity_id: str, patch: Mapping[str, Any]):
        if self.store.find_by_id(kind, entity_id) is None:
            raise NotFound(kind.__name__, entity_id)

        fields = dict(patch)
        if _is_named(kind) and "name" in fields:
            if self.store.name_taken(kind, fields["name"], exclude_id=entity_id):
                raise DuplicateName(kind.__name__, fields["name"])
            # a fresh name restarts a half-finished retirement from step 1
            fields["retired_name"] = None

        row = self.store.apply_patch(kind, entity_id, fields)
        log.info(
            "updated %s %s fields=%s",
            kind.__name__,
            entity_id,
            sorted(patch),
            extra={"entity_kind": kind.__name__, "entity_id": entity_id},
        )
        return row

    def retired_name_for(self, name: str) -> str:
        return f"{name}{self.marker}{self.clock()}"

    def soft_delete(self, kind: type[Base], entity_id: str) -> None:
        if kind is Support:
            raise UnsupportedOperation("Support rows cannot be deleted")

        row = self.store.find_by_id(kind, entity_id)
        if row is None:
            raise NotFound(kind.__name__, entity_id)

        extra = {"entity_kind": kind.__name__, "entity_id": entity_id}

        if _is_named(kind):
            if row.is_half_retired:
                log.warning("resuming soft delete of %s %s after rename", kind.__name__, entity_id, extra=extra)
            else:
                # nothing has changed yet if this raises; let it propagate as-is
                self.store.rename(kind, entity_id, self.retired_name_for(row.name))
                extra["step"] = STEP_RENAME
                log.info("renamed %s %s for retirement", kind.__name__, entity_id, extra=extra)

            try:
                self.store.mark_deleted(kind, entity_id)
            except CatalogError as exc:
                log.error(
                    "soft delete of %s %s stopped after rename",
                    kind.__name__,
                    entity_id,
                    exc_info=True,
                    extra={**extra, "step": STEP_MARK_DELETED},
                )
                raise PartialFailure(
                    kind.__name__,
                    entity_id,
                    completed=(STEP_RENAME,),
                    remaining=(STEP_MARK_DELETED,),
                ) from exc
        else:
            self.store.mark_deleted(kind, entity_id)

        log.info("soft deleted %s %s", kind.__name__, entity_id, extra={**extra, "step": STEP_MARK_DELETED})

    def resume_pending_deletes(self, kind: type[Retirable]) -> list[str]:
        """Finish step 2 for every renamed-but-live row of ``kind``; returns the finished ids."""
        if not _is_named(kind):
            raise UnsupportedOperation(f"{kind.__name__} has no two-step delete")

        done: list[str] = []
        for row in self.store.list_half_retired(kind):
            self.soft_delete(kind, row.id)
            done.append(row.id)
        return done
