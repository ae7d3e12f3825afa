# realty/schemas.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, ClassVar, List, Optional

from pydantic import (
    AfterValidator,
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    PlainSerializer,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from .config import settings
from .models import EPOCH_MS_DIGITS, NAME_MAX, UnitKind


_http_url = TypeAdapter(AnyHttpUrl)


def _check_http_url(v: str) -> str:
    # validate as http(s) but keep the exact text the client sent
    try:
        _http_url.validate_python(v)
    except ValidationError:
        raise ValueError("must be a valid http(s) URL") from None
    return v


NonEmptyStr = Annotated[str, Field(min_length=1, max_length=255)]
# leaves room for the "{marker}{epoch_ms}" suffix added when the row is retired
LIVE_NAME_MAX = NAME_MAX - len(settings.retired_name_marker) - EPOCH_MS_DIGITS
Name = Annotated[str, Field(min_length=1, max_length=LIVE_NAME_MAX)]
Phone = Annotated[str, Field(min_length=1, max_length=40)]
HttpUrlText = Annotated[str, Field(min_length=1), AfterValidator(_check_http_url)]
Percentage = Annotated[
    Decimal,
    Field(ge=0, le=100, max_digits=10, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]
Money = Annotated[float, Field(ge=0)]
Count = Annotated[int, Field(ge=0)]


class _In(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)

    def as_fields(self) -> dict[str, Any]:
        """Validated values keyed by model attribute name."""
        return self.model_dump(by_alias=False)


class _Patch(_In):
    # columns that may be cleared with an explicit null
    NULLABLE: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _no_null_for_required(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.NULLABLE:
                raise ValueError(f"{name} cannot be null")
        return self

    def as_fields(self) -> dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(by_alias=False, exclude_unset=True)


class _Out(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")
    deleted_at: Optional[datetime] = Field(default=None, serialization_alias="deletedAt")


# -------------------- Working areas --------------------

class WorkingAreaCreate(_In):
    name: Name
    description: NonEmptyStr
    url: HttpUrlText


class WorkingAreaUpdate(_Patch):
    name: Optional[Name] = None
    description: Optional[NonEmptyStr] = None
    url: Optional[HttpUrlText] = None


class WorkingAreaOut(_Out):
    name: str
    description: str
    url: str

    properties: Optional[List["PropertyOut"]] = None


# -------------------- Properties --------------------

class PropertyCreate(_In):
    name: Name
    owner: NonEmptyStr
    cover_url: HttpUrlText = Field(alias="coverUrl")
    down_payment_percentage: Percentage = Field(default=Decimal("0"), alias="downPaymentPercentage")
    number_of_year: int = Field(ge=1, alias="numberOfYear")


class PropertyUpdate(_Patch):
    name: Optional[Name] = None
    owner: Optional[NonEmptyStr] = None
    cover_url: Optional[HttpUrlText] = Field(default=None, alias="coverUrl")
    down_payment_percentage: Optional[Percentage] = Field(default=None, alias="downPaymentPercentage")
    number_of_year: Optional[int] = Field(default=None, ge=1, alias="numberOfYear")


class PropertyOut(_Out):
    name: str
    owner: str
    cover_url: str = Field(serialization_alias="coverUrl")
    down_payment_percentage: Percentage = Field(serialization_alias="downPaymentPercentage")
    number_of_year: int = Field(serialization_alias="numberOfYear")
    working_area_id: str = Field(serialization_alias="working_areaId")

    units: Optional[List["UnitOut"]] = None
    working_area: Optional[WorkingAreaOut] = None


# -------------------- Units --------------------

class UnitCreate(_In):
    type: UnitKind = UnitKind.APARTMENT
    url: HttpUrlText
    is_ready: bool = Field(default=False, alias="isReady")
    delivery_date: Optional[str] = Field(default=None, max_length=40, alias="deliveryDate")
    bedrooms: Count
    bathrooms: Count
    square_footage: Money = Field(alias="squareFootage")
    total_price: Money


class UnitUpdate(_Patch):
    NULLABLE: ClassVar[frozenset[str]] = frozenset({"delivery_date"})

    type: Optional[UnitKind] = None
    url: Optional[HttpUrlText] = None
    is_ready: Optional[bool] = Field(default=None, alias="isReady")
    delivery_date: Optional[str] = Field(default=None, max_length=40, alias="deliveryDate")
    bedrooms: Optional[Count] = None
    bathrooms: Optional[Count] = None
    square_footage: Optional[Money] = Field(default=None, alias="squareFootage")
    total_price: Optional[Money] = None


class UnitOut(_Out):
    type: UnitKind
    url: str
    is_ready: bool = Field(serialization_alias="isReady")
    delivery_date: Optional[str] = Field(default=None, serialization_alias="deliveryDate")
    bedrooms: int
    bathrooms: int
    square_footage: float = Field(serialization_alias="squareFootage")
    total_price: float
    property_id: str = Field(serialization_alias="propertyId")

    property: Optional[PropertyOut] = None


# -------------------- Support --------------------

class SupportCreate(_In):
    whatsapp_phone: Phone = Field(alias="whatsApp_phone")
    phone_number: Phone
    mail_us: EmailStr


class SupportUpdate(_Patch):
    whatsapp_phone: Optional[Phone] = Field(default=None, alias="whatsApp_phone")
    phone_number: Optional[Phone] = None
    mail_us: Optional[EmailStr] = None


class SupportOut(_Out):
    whatsapp_phone: str = Field(serialization_alias="whatsApp_phone")
    phone_number: str
    mail_us: str


class HealthOut(BaseModel):
    ok: bool
    env: str
    database: str


WorkingAreaOut.model_rebuild()
PropertyOut.model_rebuild()
UnitOut.model_rebuild()
