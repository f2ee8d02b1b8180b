import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class ShippingAddress(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


class TrackingEventCreate(BaseModel):
    status: str | None = None
    location: str | None = None
    timestamp: datetime | None = None
    description: str | None = None


class TrackingEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: str | None
    location: str | None
    timestamp: datetime
    description: str | None


class ShippingRecordCreate(BaseModel):
    order_id: uuid.UUID
    carrier: str | None = None
    tracking_number: str | None = None
    estimated_arrival: datetime | None = None
    shipping_address: ShippingAddress | None = None
    notes: str | None = None

    @field_validator("carrier", "tracking_number")
    @classmethod
    def strip_strings(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return value.strip()


class ShippingRecordUpdate(BaseModel):
    carrier: str | None = None
    tracking_number: str | None = None
    estimated_arrival: datetime | None = None
    actual_delivery_date: datetime | None = None
    shipping_address: ShippingAddress | None = None
    notes: str | None = None


class ShippingStatusUpdate(BaseModel):
    status: str
    history_entry: TrackingEventCreate | None = None


class ShippingRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_id: uuid.UUID
    carrier: str | None
    tracking_number: str | None
    status: str
    estimated_arrival: datetime | None
    actual_delivery_date: datetime | None
    shipping_address: ShippingAddress
    tracking_history: list[TrackingEventResponse]
    notes: str | None
    created_at: datetime
    updated_at: datetime
