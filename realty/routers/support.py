# realty/routers/support.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import get_lifecycle, get_resolver
from ..models import Support
from ..schemas import SupportCreate, SupportOut, SupportUpdate
from ..services.lifecycle import LifecycleManager
from ..services.resolver import RelationshipResolver

router = APIRouter(prefix="/support", tags=["support"])


@router.post("", response_model=SupportOut, status_code=201)
def create_support(
    payload: SupportCreate,
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    return resolver.to_tree(lm.create(Support, payload.as_fields()))


@router.get("", response_model=list[SupportOut])
def list_support(
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    return resolver.to_trees(lm.list_all(Support))


@router.get("/{support_id}", response_model=SupportOut)
def get_support(
    support_id: str,
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    return resolver.to_tree(lm.get(Support, support_id))


@router.put("/{support_id}", response_model=SupportOut)
def update_support(
    support_id: str,
    payload: SupportUpdate,
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    return resolver.to_tree(lm.update(Support, support_id, payload.as_fields()))
