# schemas.py (Pydantic v2)
from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, List
from datetime import date, datetime

from services.activity_types import validate_activity_type
from services.placement import as_utc


class _ActivityFields(BaseModel):
    """Shared name/description/type fields; the type is normalized on input."""
    name: str
    description: Optional[str] = None
    activity_type: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Please enter an activity name")
        return v.strip()

    @field_validator("activity_type")
    @classmethod
    def normalize_activity_type(cls, v: Optional[str]) -> str:
        return validate_activity_type(v)


class _TimeSlot(BaseModel):
    """Naive times are read as UTC."""
    start_time: datetime
    end_time: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


# ---------- Trips ----------
class TripBase(BaseModel):
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Please enter a trip name")
        return v.strip()

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("End date must be after start date")
        return self

class TripWrite(TripBase):
    pass

class TripUpdate(TripBase):
    """Name and dates are the only mutable trip fields"""
    pass

class TripRead(BaseModel):
    id: str
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ---------- Vault ----------
class VaultItemWrite(_ActivityFields):
    image_url: Optional[str] = None

class VaultItemUpdate(_ActivityFields):
    pass

class VaultItemCopy(_ActivityFields):
    original_item_id: str

class VaultItemWithTime(_ActivityFields, _TimeSlot):
    pass

class VaultItemRead(BaseModel):
    id: str
    trip_id: str
    name: str
    description: Optional[str] = None
    activity_type: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ---------- Itinerary ----------
class ItineraryItemWrite(BaseModel):
    vault_item_id: str
    # Both omitted: the item is placed in a suggested slot
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @model_validator(mode="after")
    def both_or_neither(self):
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("Please set both start and end times")
        if self.start_time and self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self

class ItineraryItemMove(_TimeSlot):
    pass

class VaultReferenceUpdate(BaseModel):
    new_vault_item_id: str

class OccurrenceCopy(_ActivityFields):
    """Edit one itinerary occurrence: copy the vault item and point this occurrence at the copy"""
    original_vault_item_id: str

class ItineraryItemRead(BaseModel):
    id: str
    trip_id: str
    vault_item_id: str
    start_time: datetime
    end_time: datetime
    created_at: datetime
    updated_at: datetime
    vault_item: Optional[VaultItemRead] = None

    class Config:
        from_attributes = True

class VaultItemWithTimeRead(BaseModel):
    vault_item: VaultItemRead
    itinerary_item: ItineraryItemRead


# ---------- Activity types ----------
class ActivityTypeRead(BaseModel):
    name: str
    badge: str
    hex: str
    border: str


class VaultDeleteResult(BaseModel):
    success: bool = True
    removed_itinerary_items: int


class TripBoard(BaseModel):
    """Everything the trip page renders: trip, vault and itinerary"""
    trip: TripRead
    vault_items: List[VaultItemRead]
    itinerary_items: List[ItineraryItemRead]
