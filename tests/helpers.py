"""Field dictionaries for the Zone1 / P1 catalog used across tests."""

from __future__ import annotations

from decimal import Decimal


def area_fields(name: str = "Zone1", **kw) -> dict:
    return {"name": name, "description": "d", "url": "http://x", **kw}


def property_fields(working_area_id: str, name: str = "P1", **kw) -> dict:
    return {
        "name": name,
        "owner": "O",
        "cover_url": "http://y",
        "down_payment_percentage": Decimal("10"),
        "number_of_year": 5,
        "working_area_id": working_area_id,
        **kw,
    }


def unit_fields(property_id: str, **kw) -> dict:
    return {
        "bedrooms": 2,
        "bathrooms": 1,
        "square_footage": 80,
        "total_price": 100000,
        "url": "http://z",
        "property_id": property_id,
        **kw,
    }


