# realty/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import sessionmaker

from realty.db import SessionLocal
from realty.models import Property, Unit, UnitKind, WorkingArea
from realty.services.lifecycle import LifecycleManager
from realty.store import EntityStore


@dataclass(frozen=True)
class SeedResult:
    working_area_id: str
    property_id: Optional[str]
    unit_id: Optional[str]


def _get_or_create_area(lm: LifecycleManager, name: str) -> WorkingArea:
    row = lm.store.find_by_name(WorkingArea, name)
    if row:
        return row
    return lm.create(
        WorkingArea,
        {"name": name, "description": f"{name} demo zone", "url": "https://example.com/zones/demo.jpg"},
    )


def _get_or_create_property(lm: LifecycleManager, name: str, working_area_id: str) -> Property:
    row = lm.store.find_by_name(Property, name)
    if row:
        return row
    return lm.create(
        Property,
        {
            "name": name,
            "owner": "Demo Developments",
            "cover_url": "https://example.com/properties/demo.jpg",
            "down_payment_percentage": Decimal("10"),
            "number_of_year": 5,
            "working_area_id": working_area_id,
        },
    )


def _ensure_unit(lm: LifecycleManager, property_id: str) -> Unit:
    prop = lm.get(Property, property_id, relations=("units",))
    if prop.units:
        return prop.units[0]
    return lm.create(
        Unit,
        {
            "type": UnitKind.APARTMENT,
            "url": "https://example.com/units/demo.jpg",
            "bedrooms": 2,
            "bathrooms": 1,
            "square_footage": 80,
            "total_price": 100_000,
            "property_id": property_id,
        },
    )


def seed_demo(
    *,
    area_name: str = "Zone1",
    property_name: str = "P1",
    create_sample_unit: bool = True,
    session_factory: sessionmaker = SessionLocal,
) -> SeedResult:
    """Idempotent: rerunning reuses the live rows with the same names."""
    db = session_factory()
    try:
        lm = LifecycleManager(EntityStore(db))

        area = _get_or_create_area(lm, area_name)
        prop = _get_or_create_property(lm, property_name, area.id)

        unit_id: Optional[str] = None
        if create_sample_unit:
            unit_id = _ensure_unit(lm, prop.id).id

        return SeedResult(working_area_id=area.id, property_id=prop.id, unit_id=unit_id)
    finally:
        db.close()
