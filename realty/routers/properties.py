# realty/routers/properties.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_lifecycle, get_resolver
from ..models import Property
from ..schemas import PropertyCreate, PropertyOut, PropertyUpdate
from ..services.lifecycle import LifecycleManager
from ..services.resolver import RelationshipResolver, parse_include

router = APIRouter(prefix="/property", tags=["properties"])

LIST_SHAPE = ("units",)
BY_NAME_SHAPE = ("units", "working_area")

INCLUDE_HELP = "Comma separated relations: units, working_area"


def _relations(include: Optional[str], default: tuple[str, ...]) -> tuple[str, ...]:
    return parse_include(include) if include is not None else default


@router.post("/{working_area_id}", response_model=PropertyOut, status_code=201, response_model_exclude_unset=True)
def create_property(
    working_area_id: str,
    payload: PropertyCreate,
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    row = lm.create(Property, {**payload.as_fields(), "working_area_id": working_area_id})
    return resolver.to_tree(row)


@router.get("", response_model=list[PropertyOut], response_model_exclude_unset=True)
def list_properties(
    include: Optional[str] = Query(default=None, description=INCLUDE_HELP),
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    relations = _relations(include, LIST_SHAPE)
    return resolver.to_trees(lm.list_all(Property, relations=relations), relations)


@router.get("/id/{property_id}", response_model=PropertyOut, response_model_exclude_unset=True)
def get_property(
    property_id: str,
    include: Optional[str] = Query(default=None, description=INCLUDE_HELP),
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    relations = _relations(include, BY_NAME_SHAPE)
    return resolver.to_tree(lm.get(Property, property_id, relations=relations), relations)


@router.get("/{name}", response_model=PropertyOut, response_model_exclude_unset=True)
def get_property_by_name(
    name: str,
    include: Optional[str] = Query(default=None, description=INCLUDE_HELP),
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    relations = _relations(include, BY_NAME_SHAPE)
    return resolver.to_tree(lm.get_by_name(Property, name, relations=relations), relations)


@router.put("/{property_id}", response_model=PropertyOut, response_model_exclude_unset=True)
def update_property(
    property_id: str,
    payload: PropertyUpdate,
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    return resolver.to_tree(lm.update(Property, property_id, payload.as_fields()))


@router.delete("/{property_id}")
def delete_property(property_id: str, lm: LifecycleManager = Depends(get_lifecycle)):
    # units are left as they are; see LifecycleManager.soft_delete
    lm.soft_delete(Property, property_id)
    return {"ok": True}
