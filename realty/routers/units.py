# realty/routers/units.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_lifecycle, get_resolver
from ..models import Unit
from ..schemas import UnitCreate, UnitOut, UnitUpdate
from ..services.lifecycle import LifecycleManager
from ..services.resolver import RelationshipResolver, parse_include

router = APIRouter(prefix="/unit", tags=["units"])

DEFAULT_SHAPE = ("property.working_area",)


@router.post("/{property_id}", response_model=UnitOut, status_code=201, response_model_exclude_unset=True)
def create_unit(
    property_id: str,
    payload: UnitCreate,
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    row = lm.create(Unit, {**payload.as_fields(), "property_id": property_id})
    return resolver.to_tree(row)


@router.get("", response_model=list[UnitOut], response_model_exclude_unset=True)
def list_units(
    include: Optional[str] = Query(default=None, description="Comma separated relations: property, property.working_area"),
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    relations = parse_include(include) if include is not None else DEFAULT_SHAPE
    return resolver.to_trees(lm.list_all(Unit, relations=relations), relations)


@router.get("/{unit_id}", response_model=UnitOut, response_model_exclude_unset=True)
def get_unit(
    unit_id: str,
    include: Optional[str] = Query(default=None, description="Comma separated relations: property, property.working_area"),
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    relations = parse_include(include) if include is not None else DEFAULT_SHAPE
    return resolver.to_tree(lm.get(Unit, unit_id, relations=relations), relations)


@router.put("/{unit_id}", response_model=UnitOut, response_model_exclude_unset=True)
def update_unit(
    unit_id: str,
    payload: UnitUpdate,
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    return resolver.to_tree(lm.update(Unit, unit_id, payload.as_fields()))


@router.delete("/{unit_id}")
def delete_unit(unit_id: str, lm: LifecycleManager = Depends(get_lifecycle)):
    lm.soft_delete(Unit, unit_id)
    return {"ok": True}
