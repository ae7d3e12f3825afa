"""Typed errors raised by the catalog core.

Routers translate these into HTTP responses (see ``realty.main``); nothing in
the core turns them into status codes itself.
"""

from __future__ import annotations

from typing import Sequence


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    code = "catalog_error"


class NotFound(CatalogError):
    """Raised when a referenced entity is absent or already soft-deleted."""

    code = "not_found"

    def __init__(self, kind: str, key: str, *, field: str = "id") -> None:
        self.kind = kind
        self.key = key
        self.field = field
        super().__init__(f"{kind} with {field}={key!r} not found")


class ParentNotFound(NotFound):
    """Raised on create when the owning parent is missing or not live."""

    code = "parent_not_found"


class DuplicateName(CatalogError):
    """Raised when a create/update would collide with a live row's name."""

    code = "duplicate_name"

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} name {name!r} is already in use")


class StorageError(CatalogError):
    """Raised when the database rejects or fails an operation."""

    code = "storage_error"


class ConstraintViolation(StorageError):
    """Raised when a storage-level constraint (FK, unique index) fails."""

    code = "constraint_violation"


class PartialFailure(CatalogError):
    """Raised when a two-step soft-delete stopped between its steps.

    ``completed`` and ``remaining`` name the sub-steps so a caller can retry
    only what is left.
    """

    code = "partial_failure"

    def __init__(
        self,
        kind: str,
        entity_id: str,
        *,
        completed: Sequence[str],
        remaining: Sequence[str],
    ) -> None:
        self.kind = kind
        self.entity_id = entity_id
        self.completed = tuple(completed)
        self.remaining = tuple(remaining)
        super().__init__(
            f"{kind} {entity_id}: completed {list(self.completed)}, remaining {list(self.remaining)}"
        )


class InvalidRelation(CatalogError):
    """Raised when a caller asks for a relation path the kind does not declare."""

    code = "invalid_relation"


class UnsupportedOperation(CatalogError):
    """Raised when an operation is not defined for an entity kind."""

    code = "unsupported_operation"
