import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReturnImage(BaseModel):
    url: str
    public_id: str | None = None


class ReturnShipping(BaseModel):
    carrier: str | None = None
    tracking_number: str | None = None
    status: str | None = None


class ReturnRequestCreate(BaseModel):
    order_id: uuid.UUID
    reason: str
    images: list[ReturnImage] = Field(default_factory=list)
    return_shipping: ReturnShipping | None = None


class ReturnProcessRequest(BaseModel):
    status: str
    admin_response: str | None = None
    refund_amount: float | None = None
    refund_method: str | None = None


class ReturnRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_id: uuid.UUID
    user_id: str
    reason: str
    status: str
    images: list[ReturnImage]
    admin_response: str | None
    processed_by: str | None
    processed_at: datetime | None
    refund_amount: float
    refund_method: str | None
    return_shipping: ReturnShipping | None
    created_at: datetime
    updated_at: datetime
