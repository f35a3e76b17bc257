"""
Pydantic schema definitions for the vehicle catalogue.

``Vehicle`` mirrors one stored document plus its store-assigned id.
``VehicleForm`` and ``EditForm`` carry what the add and edit forms
submit: text fields as typed by the user and year/price as raw strings.
Numbers are parsed the lenient way a browser's ``parseInt`` /
``parseFloat`` would, so ``"2019 model"`` still yields ``2019`` and
``"abc"`` yields ``None``. No range or sign checks are made.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import Literal


CATEGORIES: List[str] = ["SUV", "Sedan", "Hatchback", "Sub4m"]
ALL = "All"

Category = Literal["SUV", "Sedan", "Hatchback", "Sub4m"]
FilterValue = Literal["All", "SUV", "Sedan", "Hatchback", "Sub4m"]

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_year(raw: Any) -> Optional[int]:
    """Leading-integer parse; ``None`` when no digits lead the value."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    m = _INT_PREFIX_RE.match(str(raw))
    return int(m.group(1)) if m else None


def parse_price(raw: Any) -> Optional[float]:
    """Leading-float parse; ``None`` when the value is not numeric."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None
    m = _FLOAT_PREFIX_RE.match(str(raw))
    if not m:
        return None
    value = float(m.group(1))
    return value if math.isfinite(value) else None


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _number_text(value: Optional[float]) -> str:
    """Text shown in a form input for a stored number."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class Vehicle(BaseModel):
    """A vehicle record as read back from the store.

    Stored documents use camelCase timestamps (``createdAt``,
    ``updatedAt``); both spellings are accepted on input. ``year`` and
    ``price`` are ``None`` when the stored value is not numeric.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    make: str = ""
    model: str = ""
    chassis: str = ""
    category: str = ""
    year: Optional[int] = None
    price: Optional[float] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @field_validator("make", "model", "chassis", "category", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("year", mode="before")
    @classmethod
    def _year(cls, value: Any) -> Optional[int]:
        return parse_year(value)

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, value: Any) -> Optional[float]:
        return parse_price(value)

    @classmethod
    def from_document(cls, record_id: str, doc: Dict[str, Any]) -> "Vehicle":
        data = dict(doc)
        data["id"] = record_id
        return cls.model_validate(data)


class _NumberInputs(BaseModel):
    """Year and price as typed; parsed only when a document is built."""

    year: str = ""
    price: str = ""

    @field_validator("year", "price", mode="before")
    @classmethod
    def _raw(cls, value: Any) -> str:
        return "" if value is None else str(value)


class VehicleForm(_NumberInputs):
    """Fields submitted by the add form."""

    make: str
    model: str
    chassis: str
    category: Category

    def to_record(self, created_at: str) -> Dict[str, Any]:
        """Normalized document for insertion; the store assigns the id."""
        return {
            "make": self.make.strip(),
            "model": self.model.strip(),
            "chassis": self.chassis.upper().strip(),
            "category": self.category,
            "year": parse_year(self.year),
            "price": parse_price(self.price),
            "createdAt": created_at,
        }


class EditForm(_NumberInputs):
    """Fields of the edit surface.

    ``chassis`` is shown read-only and never written back. ``category``
    keeps whatever the stored record holds, even a value outside
    ``CATEGORIES``, so opening and saving a record does not change it.
    """

    vehicle_id: str
    make: str
    model: str
    chassis: str = ""
    category: str

    @classmethod
    def from_vehicle(cls, vehicle: Vehicle) -> "EditForm":
        return cls(
            vehicle_id=vehicle.id,
            make=vehicle.make,
            model=vehicle.model,
            chassis=vehicle.chassis,
            category=vehicle.category,
            year=_number_text(vehicle.year),
            price=_number_text(vehicle.price),
        )

    def to_changes(self, updated_at: str) -> Dict[str, Any]:
        return {
            "make": self.make.strip(),
            "model": self.model.strip(),
            "category": self.category,
            "year": parse_year(self.year),
            "price": parse_price(self.price),
            "updatedAt": updated_at,
        }


class EditFields(_NumberInputs):
    """Body of an update request; the target id comes from the URL."""

    make: str
    model: str
    category: Category


class Statistics(BaseModel):
    """Aggregates over the full in-memory sequence."""

    total: int = 0
    total_value: float = 0.0
    by_category: Dict[str, int] = Field(
        default_factory=lambda: {name: 0 for name in CATEGORIES}
    )


class ViewState(BaseModel):
    category: Optional[FilterValue] = None
    search: Optional[str] = None


class CatalogView(BaseModel):
    """JSON shape of the currently displayed cards."""

    filter: str
    search: str
    count_label: str
    total_matches: int
    items: List[Vehicle]
