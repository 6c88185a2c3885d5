# VENDORS/models.py
import re
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from farmstand.utils.sanitize import SanitizedModel

# Fixed weekday tags, in display order
WEEKDAYS = ("Mon", "Tues", "Weds", "Thurs", "Fri", "Sat", "Sun")

# Top-level keys that may be written independently of each other
FIELD_GROUPS = ("location", "items", "hours", "vendorName")

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def new_item_id() -> str:
    return uuid.uuid4().hex


# ---------------------------
# Stock
# ---------------------------
class StockItem(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # None only for items written before ids existed; filled on the next items write
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(..., ge=0)
    price: Optional[float] = Field(None, ge=0)
    price_per_dozen: Optional[float] = Field(None, ge=0)

    def to_document(self) -> Dict[str, Any]:
        # `price` is left out when unset, `pricePerDozen` is always written (possibly null)
        doc = {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "pricePerDozen": self.price_per_dozen,
        }
        if self.price is not None:
            doc["price"] = self.price
        return doc


def total_quantity(items: List[StockItem]) -> int:
    return sum(item.quantity for item in items)


# ---------------------------
# Location
# ---------------------------
class Location(BaseModel):
    address: str = Field(..., min_length=1, max_length=300)
    note: Optional[str] = None
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_document(self) -> Dict[str, Any]:
        return {"address": self.address, "note": self.note, "lat": self.lat, "lng": self.lng}


# ---------------------------
# Hours
# ---------------------------
class DayHours(BaseModel):
    model_config = ConfigDict(extra="forbid")

    open: str = ""
    close: str = ""
    closed: bool = True

    @model_validator(mode="before")
    @classmethod
    def times_need_closed_flag(cls, data):
        if isinstance(data, dict) and "closed" not in data and (data.get("open") or data.get("close")):
            raise ValueError("closed must be set to true or false when open/close times are given")
        return data

    @model_validator(mode="after")
    def check_open_close(self):
        if self.closed:
            # a closed day never keeps stale times
            self.open = ""
            self.close = ""
            return self
        for label, value in (("open", self.open), ("close", self.close)):
            if not HHMM_PATTERN.match(value or ""):
                raise ValueError(f"{label} time must be HH:MM (24-hour) when the stand is open")
        return self


class WeeklyHours(BaseModel):
    """Opening hours keyed by weekday tag. Days left out default to closed."""
    model_config = ConfigDict(extra="forbid")

    Mon: DayHours = Field(default_factory=DayHours)
    Tues: DayHours = Field(default_factory=DayHours)
    Weds: DayHours = Field(default_factory=DayHours)
    Thurs: DayHours = Field(default_factory=DayHours)
    Fri: DayHours = Field(default_factory=DayHours)
    Sat: DayHours = Field(default_factory=DayHours)
    Sun: DayHours = Field(default_factory=DayHours)

    def day(self, tag: str) -> DayHours:
        return getattr(self, tag)

    def to_document(self) -> Dict[str, Dict[str, Any]]:
        return {tag: self.day(tag).model_dump() for tag in WEEKDAYS}


# ---------------------------
# Vendor record
# ---------------------------
class VendorRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    vendor_name: str = ""
    email: Optional[str] = None
    location: Optional[Location] = None
    hours: WeeklyHours = Field(default_factory=WeeklyHours)
    items: List[StockItem] = Field(default_factory=list)
    last_updated: Optional[datetime] = None

    @field_validator("hours", mode="before")
    @classmethod
    def missing_hours_are_closed(cls, v):
        return WeeklyHours() if v is None else v

    @field_validator("items", mode="before")
    @classmethod
    def missing_items_are_empty(cls, v):
        return [] if v is None else v

    @property
    def total_quantity(self) -> int:
        return total_quantity(self.items)

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "VendorRecord":
        return cls.model_validate({**data, "id": doc_id})

    @classmethod
    def skeleton(cls, doc_id: str, email: Optional[str] = None, vendor_name: str = "") -> "VendorRecord":
        return cls(id=doc_id, vendor_name=vendor_name, email=email)

    def to_document(self) -> Dict[str, Any]:
        return {
            "vendorName": self.vendor_name,
            "email": self.email,
            "location": self.location.to_document() if self.location else None,
            "hours": self.hours.to_document(),
            "items": [item.to_document() for item in self.items],
            "lastUpdated": self.last_updated,
        }


# ---------------------------
# Forms
# ---------------------------
class ItemForm(SanitizedModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(..., ge=0)
    price: Optional[float] = Field(None, ge=0)
    price_per_dozen: Optional[float] = Field(None, ge=0)


class QuantityForm(BaseModel):
    quantity: int = Field(..., ge=0)


class LocationForm(SanitizedModel):
    address: str = Field(..., min_length=1, max_length=300)
    note: Optional[str] = Field(None, max_length=300)


class NoteForm(SanitizedModel):
    note: str = Field(..., min_length=1, max_length=300)


class VendorNameForm(SanitizedModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    vendor_name: str = Field(..., min_length=1, max_length=100)
