# realty/deps.py
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from .db import get_db
from .services.lifecycle import LifecycleManager
from .services.resolver import RelationshipResolver
from .store import EntityStore

_resolver = RelationshipResolver()


def get_resolver() -> RelationshipResolver:
    return _resolver


def get_store(db: Session = Depends(get_db), resolver: RelationshipResolver = Depends(get_resolver)) -> EntityStore:
    return EntityStore(db, resolver)


def get_lifecycle(store: EntityStore = Depends(get_store)) -> LifecycleManager:
    return LifecycleManager(store)
