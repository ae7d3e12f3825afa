# realty/models.py
from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


LIVE_ROWS = text("deleted_at IS NULL")

NAME_MAX = 255
# "{marker}{epoch_ms}" is appended on retirement; epoch ms stays 13 digits until 2286
EPOCH_MS_DIGITS = 13


class UnitKind(str, enum.Enum):
    APARTMENT = "apartment"
    VILLA = "villa"
    TWIN_HOUSE = "twin-house"
    TOWN_HOUSE = "town-house"
    STUDIO = "studio"


# -----------------------------
# Auditable base
# -----------------------------
class Auditable:
    """Columns shared by every catalog table.

    ``deleted_at`` is the soft-delete marker: a non-null value hides the row
    from every default query. It is never cleared once set.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    @property
    def is_live(self) -> bool:
        return self.deleted_at is None


class Retirable(Auditable):
    """Auditable rows with a name that must stay unique among live rows.

    ``retired_name`` is written by the first soft-delete step. A live row
    whose ``name`` still equals ``retired_name`` was renamed but never marked
    deleted. Changing ``name`` through an update clears ``retired_name``.
    """

    name: Mapped[str] = mapped_column(String(NAME_MAX), nullable=False)
    retired_name: Mapped[Optional[str]] = mapped_column(String(NAME_MAX), nullable=True)

    @property
    def is_half_retired(self) -> bool:
        return self.deleted_at is None and self.retired_name is not None and self.name == self.retired_name


# -----------------------------
# Catalog
# -----------------------------
class WorkingArea(Retirable, Base):
    __tablename__ = "working_areas"
    __table_args__ = (
        Index(
            "uq_working_areas_live_name",
            "name",
            unique=True,
            postgresql_where=LIVE_ROWS,
            sqlite_where=LIVE_ROWS,
        ),
    )

    description: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)

    # no ORM cascade: retiring a zone leaves its properties alone
    properties: Mapped[List["Property"]] = relationship(back_populates="working_area")


class Property(Retirable, Base):
    __tablename__ = "properties"
    __table_args__ = (
        Index(
            "uq_properties_live_name",
            "name",
            unique=True,
            postgresql_where=LIVE_ROWS,
            sqlite_where=LIVE_ROWS,
        ),
    )

    owner: Mapped[str] = mapped_column(String(255), nullable=False)
    cover_url: Mapped[str] = mapped_column(Text, nullable=False)
    down_payment_percentage: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    number_of_year: Mapped[int] = mapped_column(Integer, nullable=False)

    working_area_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("working_areas.id"), nullable=False, index=True
    )

    working_area: Mapped["WorkingArea"] = relationship(back_populates="properties")
    # the FK cascades physical deletes only; soft delete never reaches units
    units: Mapped[List["Unit"]] = relationship(back_populates="property", passive_deletes=True)


class Unit(Auditable, Base):
    __tablename__ = "units"

    type: Mapped[UnitKind] = mapped_column(
        Enum(UnitKind, name="unit_kind", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UnitKind.APARTMENT,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    is_ready: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    delivery_date: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)

    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    square_footage: Mapped[float] = mapped_column(Float, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False)

    property_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("properties.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )

    property: Mapped["Property"] = relationship(back_populates="units")


class Support(Auditable, Base):
    __tablename__ = "supports"

    whatsapp_phone: Mapped[str] = mapped_column(String(40), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(40), nullable=False)
    mail_us: Mapped[str] = mapped_column(String(255), nullable=False)


NAMED_KINDS: tuple[type[Retirable], ...] = (WorkingArea, Property)

# kind -> (parent foreign key attribute, parent kind)
PARENTS: dict[type[Base], tuple[str, type[Base]]] = {
    Property: ("working_area_id", WorkingArea),
    Unit: ("property_id", Property),
}
