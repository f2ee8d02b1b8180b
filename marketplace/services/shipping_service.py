"""Shipping record lifecycle: creation, status updates and tracking history."""

import uuid
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.db.base import now_utc
from marketplace.errors import DuplicateError, NotFoundError, StorageError, ValidationError
from marketplace.models.shipping_record import (
    ADDRESS_FIELD_MAX_LENGTH,
    ADDRESS_FIELDS,
    CARRIER_MAX_LENGTH,
    SHIPPING_STATUS_MAX_LENGTH,
    SHIPPING_STATUS_VALUES,
    TRACKING_LOCATION_MAX_LENGTH,
    TRACKING_NUMBER_MAX_LENGTH,
    ShippingRecord,
    ShippingStatus,
    TrackingEvent,
)
from marketplace.observability import log_event
from marketplace.schemas.shipping import ShippingAddress, ShippingRecordUpdate, TrackingEventCreate
from marketplace.services.identifiers import parse_id

_UPDATABLE_FIELDS = (
    "carrier",
    "tracking_number",
    "estimated_arrival",
    "actual_delivery_date",
    "notes",
)


def _status_value(status: ShippingStatus | str | None) -> str | None:
    if isinstance(status, ShippingStatus):
        return status.value
    return status


def _too_long(value: str | None, limit: int) -> bool:
    return value is not None and len(value) > limit


def status_violations(status: str | None) -> list[str]:
    if status is None:
        return ["Status is required"]
    violations = []
    if len(status) > SHIPPING_STATUS_MAX_LENGTH:
        violations.append(f"Status cannot exceed {SHIPPING_STATUS_MAX_LENGTH} characters")
    if status not in SHIPPING_STATUS_VALUES:
        allowed = ", ".join(s.value for s in ShippingStatus)
        violations.append(f"Status '{status}' is not one of: {allowed}")
    return violations


class ShippingLifecycleManager:
    """Keeps a shipping record's status and tracking history consistent.

    ``actual_delivery_date`` is stamped by :meth:`update_status` the first time the
    record becomes ``delivered`` and is never overwritten by it afterward; only
    :meth:`update_details` may change it once set.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = now_utc) -> None:
        self.db = db
        self.clock = clock

    def create(
        self,
        order_id: uuid.UUID,
        address: ShippingAddress | None = None,
        *,
        carrier: str | None = None,
        tracking_number: str | None = None,
        estimated_arrival: datetime | None = None,
        notes: str | None = None,
    ) -> ShippingRecord:
        record = ShippingRecord(
            order_id=order_id,
            carrier=carrier,
            tracking_number=tracking_number,
            status=ShippingStatus.PENDING.value,
            estimated_arrival=estimated_arrival,
            shipping_address=address.model_dump() if address else {},
            notes=notes,
        )
        record = self._save(record)
        log_event(
            "shipping_record_created",
            order_id=str(record.order_id),
            record_id=str(record.id),
        )
        return record

    def update_status(
        self,
        record: ShippingRecord,
        new_status: ShippingStatus | str,
        history_entry: TrackingEventCreate | None = None,
    ) -> ShippingRecord:
        status = _status_value(new_status)
        previous_status = record.status
        record.status = status

        if status == ShippingStatus.DELIVERED.value and record.actual_delivery_date is None:
            record.actual_delivery_date = self.clock()

        if history_entry is not None:
            record.tracking_history.append(self._tracking_event(history_entry))

        record = self._save(record)
        log_event(
            f"shipping_status_changed:{previous_status}->{status}",
            order_id=str(record.order_id),
            record_id=str(record.id),
        )
        return record

    def append_tracking_event(
        self, record: ShippingRecord, entry: TrackingEventCreate
    ) -> ShippingRecord:
        record.tracking_history.append(self._tracking_event(entry))
        return self._save(record)

    def update_details(
        self, record: ShippingRecord, changes: ShippingRecordUpdate
    ) -> ShippingRecord:
        updates = changes.model_dump(exclude_unset=True)
        for field_name in _UPDATABLE_FIELDS:
            if field_name in updates:
                setattr(record, field_name, updates[field_name])
        if "shipping_address" in updates:
            address = changes.shipping_address
            record.shipping_address = address.model_dump() if address else {}
        return self._save(record)

    def validate(self, record: ShippingRecord) -> None:
        violations = []
        if record.order_id is None:
            violations.append("Order id is required")
        if _too_long(record.carrier, CARRIER_MAX_LENGTH):
            violations.append(f"Carrier name cannot exceed {CARRIER_MAX_LENGTH} characters")
        if _too_long(record.tracking_number, TRACKING_NUMBER_MAX_LENGTH):
            violations.append(
                f"Tracking number cannot exceed {TRACKING_NUMBER_MAX_LENGTH} characters"
            )
        violations.extend(status_violations(record.status))

        for field_name in ADDRESS_FIELDS:
            if _too_long((record.shipping_address or {}).get(field_name), ADDRESS_FIELD_MAX_LENGTH):
                violations.append(
                    f"Address {field_name} cannot exceed {ADDRESS_FIELD_MAX_LENGTH} characters"
                )

        for index, event in enumerate(record.tracking_history):
            if _too_long(event.status, SHIPPING_STATUS_MAX_LENGTH):
                violations.append(
                    f"Tracking event {index} status cannot exceed "
                    f"{SHIPPING_STATUS_MAX_LENGTH} characters"
                )
            if _too_long(event.location, TRACKING_LOCATION_MAX_LENGTH):
                violations.append(
                    f"Tracking event {index} location cannot exceed "
                    f"{TRACKING_LOCATION_MAX_LENGTH} characters"
                )

        if violations:
            raise ValidationError(violations)

    def get(self, record_id: str | uuid.UUID) -> ShippingRecord:
        key = parse_id(record_id, "Shipping record")
        record = self._fetch_one(select(ShippingRecord).where(ShippingRecord.id == key))
        if record is None:
            raise NotFoundError("Shipping record")
        return record

    def get_by_order(self, order_id: str | uuid.UUID) -> ShippingRecord:
        key = parse_id(order_id, "Shipping record")
        record = self._fetch_one(select(ShippingRecord).where(ShippingRecord.order_id == key))
        if record is None:
            raise NotFoundError("Shipping record")
        return record

    def get_by_tracking_number(self, tracking_number: str) -> ShippingRecord:
        record = self._fetch_one(
            select(ShippingRecord).where(ShippingRecord.tracking_number == tracking_number)
        )
        if record is None:
            raise NotFoundError("Shipping record")
        return record

    def list_records(self, status: ShippingStatus | str | None = None) -> list[ShippingRecord]:
        query = select(ShippingRecord)
        if status:
            query = query.where(ShippingRecord.status == _status_value(status))
        try:
            return list(self.db.scalars(query.order_by(ShippingRecord.created_at.desc())))
        except SQLAlchemyError as exc:
            raise StorageError("Error fetching shipping records", str(exc)) from exc

    def _fetch_one(self, query) -> ShippingRecord | None:
        try:
            return self.db.scalars(query).first()
        except SQLAlchemyError as exc:
            raise StorageError("Error fetching shipping record", str(exc)) from exc

    def _tracking_event(self, entry: TrackingEventCreate) -> TrackingEvent:
        return TrackingEvent(
            status=entry.status,
            location=entry.location,
            timestamp=entry.timestamp or self.clock(),
            description=entry.description,
        )

    def _save(self, record: ShippingRecord) -> ShippingRecord:
        try:
            self.validate(record)
        except ValidationError:
            self.db.rollback()
            raise

        order_id = record.order_id
        # child rows alone never trigger the column onupdate
        record.updated_at = self.clock()
        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateError("Shipping record", f"order_id={order_id}") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Error saving shipping record", str(exc)) from exc
        self.db.refresh(record)
        return record
