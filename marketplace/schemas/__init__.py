from marketplace.schemas.category import CategoryResponse
from marketplace.schemas.envelope import Envelope, ErrorEnvelope, ListEnvelope
from marketplace.schemas.returns import (
    ReturnProcessRequest,
    ReturnRequestCreate,
    ReturnRequestResponse,
)
from marketplace.schemas.shipping import (
    ShippingAddress,
    ShippingRecordCreate,
    ShippingRecordResponse,
    ShippingRecordUpdate,
    ShippingStatusUpdate,
    TrackingEventCreate,
)

__all__ = [
    "CategoryResponse",
    "Envelope",
    "ListEnvelope",
    "ErrorEnvelope",
    "ShippingAddress",
    "ShippingRecordCreate",
    "ShippingRecordUpdate",
    "ShippingStatusUpdate",
    "ShippingRecordResponse",
    "TrackingEventCreate",
    "ReturnRequestCreate",
    "ReturnProcessRequest",
    "ReturnRequestResponse",
]
