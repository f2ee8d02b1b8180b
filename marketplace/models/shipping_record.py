import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.db.base import Base, now_utc

CARRIER_MAX_LENGTH = 100
TRACKING_NUMBER_MAX_LENGTH = 100
SHIPPING_STATUS_MAX_LENGTH = 50
ADDRESS_FIELD_MAX_LENGTH = 255
TRACKING_LOCATION_MAX_LENGTH = 255
ADDRESS_FIELDS = ("full_name", "phone", "street", "city", "state", "zip_code", "country")


class ShippingStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    FAILED = "failed"
    RETURNED = "returned"


SHIPPING_STATUS_VALUES = frozenset(status.value for status in ShippingStatus)


class ShippingRecord(Base):
    __tablename__ = "shipping_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # one shipping record per order
    order_id: Mapped[uuid.UUID] = mapped_column(Uuid, unique=True, nullable=False, index=True)
    carrier: Mapped[str | None] = mapped_column(String(CARRIER_MAX_LENGTH), nullable=True)
    tracking_number: Mapped[str | None] = mapped_column(
        String(TRACKING_NUMBER_MAX_LENGTH), nullable=True, index=True
    )
    status: Mapped[str] = mapped_column(
        String(SHIPPING_STATUS_MAX_LENGTH),
        nullable=False,
        default=ShippingStatus.PENDING.value,
        index=True,
    )
    estimated_arrival: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    actual_delivery_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    shipping_address: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    tracking_history: Mapped[list["TrackingEvent"]] = relationship(
        back_populates="shipping_record",
        order_by="TrackingEvent.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )


class TrackingEvent(Base):
    __tablename__ = "shipping_tracking_events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    shipping_record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("shipping_records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str | None] = mapped_column(String(SHIPPING_STATUS_MAX_LENGTH), nullable=True)
    location: Mapped[str | None] = mapped_column(
        String(TRACKING_LOCATION_MAX_LENGTH), nullable=True
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    shipping_record: Mapped[ShippingRecord] = relationship(back_populates="tracking_history")
