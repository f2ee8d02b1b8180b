# Import SQLAlchemy models so they register on Base.metadata
from marketplace.models.category import Category  # noqa: F401
from marketplace.models.return_request import RefundMethod, ReturnRequest, ReturnStatus  # noqa: F401
from marketplace.models.shipping_record import (  # noqa: F401
    ShippingRecord,
    ShippingStatus,
    TrackingEvent,
)
