# realty/services/resolver.py
from __future__ import annotations

from typing import Any, Iterable, Sequence

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import selectinload

from ..db import Base
from ..errors import InvalidRelation
from ..models import Property, Support, Unit, WorkingArea


# Declared association paths per kind. Anything else is rejected.
RELATIONS: dict[type[Base], tuple[str, ...]] = {
    WorkingArea: ("properties", "properties.units"),
    Property: ("units", "working_area"),
    Unit: ("property", "property.working_area"),
    Support: (),
}


def parse_include(raw: str | None) -> tuple[str, ...]:
    """Split an ``include=a,b.c`` query value; ``None`` means "use the default shape"."""
    if raw is None:
        return ()
    return tuple(p.strip() for p in raw.split(",") if p.strip())


def _group(paths: Iterable[str]) -> dict[str, list[str]]:
    """
    "properties.units", "working_area" -> {"properties": ["units"], "working_area": []}
    """
    out: dict[str, list[str]] = {}
    for path in paths:
        head, _, rest = path.partition(".")
        tails = out.setdefault(head, [])
        if rest:
            tails.append(rest)
    return out


class RelationshipResolver:
    """
    Builds eager-loading options for the relation paths a request asks for
    and flattens the loaded graph into plain dicts.

    Soft-deleted rows are filtered out of every loaded collection and parent
    reference unless include_deleted=True.
    """

    def validate(self, kind: type[Base], relations: Sequence[str]) -> tuple[str, ...]:
        allowed = RELATIONS.get(kind, ())
        bad = [r for r in relations if r not in allowed]
        if bad:
            raise InvalidRelation(
                f"{kind.__name__} does not declare relation(s) {bad}; allowed: {list(allowed)}"
            )
        return tuple(dict.fromkeys(relations))

    def options(
        self,
        kind: type[Base],
        relations: Sequence[str],
        *,
        include_deleted: bool = False,
    ) -> list:
        opts = []
        for path in self.validate(kind, relations):
            loader = None
            current = kind
            for attr_name in path.split("."):
                attr = getattr(current, attr_name)
                target = attr.property.mapper.class_
                if not include_deleted:
                    attr = attr.and_(target.deleted_at.is_(None))
                loader = selectinload(attr) if loader is None else loader.selectinload(attr)
                current = target
            opts.append(loader)
        return opts

    def to_tree(self, row: Base | None, relations: Sequence[str] = ()) -> dict[str, Any] | None:
        """Column values of ``row`` plus the requested (already loaded) relations."""
        if row is None:
            return None

        tree: dict[str, Any] = {
            attr.key: getattr(row, attr.key) for attr in sa_inspect(type(row)).column_attrs
        }
        for head, tails in _group(relations).items():
            value = getattr(row, head)
            if isinstance(value, list):
                tree[head] = [self.to_tree(child, tails) for child in value]
            else:
                tree[head] = self.to_tree(value, tails)
        return tree

    def to_trees(self, rows: Iterable[Base], relations: Sequence[str] = ()) -> list[dict[str, Any]]:
        return [self.to_tree(r, relations) for r in rows]
