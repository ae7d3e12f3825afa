# realty/routers/working_areas.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_lifecycle, get_resolver
from ..models import WorkingArea
from ..schemas import WorkingAreaCreate, WorkingAreaOut, WorkingAreaUpdate
from ..services.lifecycle import LifecycleManager
from ..services.resolver import RelationshipResolver, parse_include

router = APIRouter(prefix="/workingarea", tags=["working areas"])

LIST_SHAPE = ("properties",)
BY_NAME_SHAPE = ("properties.units",)

INCLUDE_HELP = "Comma separated relations: properties, properties.units"


@router.post("", response_model=WorkingAreaOut, status_code=201, response_model_exclude_unset=True)
def create_working_area(
    payload: WorkingAreaCreate,
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    row = lm.create(WorkingArea, payload.as_fields())
    return resolver.to_tree(row)


@router.get("", response_model=list[WorkingAreaOut], response_model_exclude_unset=True)
def list_working_areas(
    include: Optional[str] = Query(default=None, description=INCLUDE_HELP),
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    relations = parse_include(include) if include is not None else LIST_SHAPE
    return resolver.to_trees(lm.list_all(WorkingArea, relations=relations), relations)


@router.get("/id/{working_area_id}", response_model=WorkingAreaOut, response_model_exclude_unset=True)
def get_working_area(
    working_area_id: str,
    include: Optional[str] = Query(default=None, description=INCLUDE_HELP),
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    relations = parse_include(include) if include is not None else BY_NAME_SHAPE
    row = lm.get(WorkingArea, working_area_id, relations=relations)
    return resolver.to_tree(row, relations)


@router.get("/{name}", response_model=WorkingAreaOut, response_model_exclude_unset=True)
def get_working_area_by_name(
    name: str,
    include: Optional[str] = Query(default=None, description=INCLUDE_HELP),
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    relations = parse_include(include) if include is not None else BY_NAME_SHAPE
    row = lm.get_by_name(WorkingArea, name, relations=relations)
    return resolver.to_tree(row, relations)


@router.put("/{working_area_id}", response_model=WorkingAreaOut, response_model_exclude_unset=True)
def update_working_area(
    working_area_id: str,
    payload: WorkingAreaUpdate,
    lm: LifecycleManager = Depends(get_lifecycle),
    resolver: RelationshipResolver = Depends(get_resolver),
):
    row = lm.update(WorkingArea, working_area_id, payload.as_fields())
    return resolver.to_tree(row)


@router.delete("/{working_area_id}")
def delete_working_area(working_area_id: str, lm: LifecycleManager = Depends(get_lifecycle)):
    lm.soft_delete(WorkingArea, working_area_id)
    return {"ok": True}
