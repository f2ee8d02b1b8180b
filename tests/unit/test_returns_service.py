import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from marketplace.errors import NotFoundError, ValidationError
from marketplace.models.return_request import RefundMethod, ReturnStatus
from marketplace.schemas.returns import ReturnImage, ReturnShipping
from marketplace.services.returns_service import ReturnRequestService

PROCESSED_AT = datetime(2026, 4, 2, 8, 15, tzinfo=timezone.utc)


def _service(db_session) -> ReturnRequestService:
    return ReturnRequestService(db_session, clock=lambda: PROCESSED_AT)


def test_create_starts_pending_with_zero_refund(db_session):
    order_id = uuid.uuid4()
    request = _service(db_session).create(
        order_id,
        "buyer-1",
        "Item arrived damaged",
        images=[ReturnImage(url="https://img.example/1.jpg", public_id="returns/1")],
        return_shipping=ReturnShipping(carrier="UPS"),
    )

    assert request.order_id == order_id
    assert request.status == ReturnStatus.PENDING.value
    assert request.refund_amount == Decimal("0")
    assert request.processed_by is None
    assert request.images == [{"url": "https://img.example/1.jpg", "public_id": "returns/1"}]
    assert request.return_shipping["carrier"] == "UPS"


def test_create_requires_reason(db_session):
    with pytest.raises(ValidationError) as exc_info:
        _service(db_session).create(uuid.uuid4(), "buyer-1", "  ")

    assert exc_info.value.violations == ["Return reason is required"]


def test_update_status_records_admin_decision(db_session):
    service = _service(db_session)
    request = service.create(uuid.uuid4(), "buyer-1", "Wrong size")

    request = service.update_status(
        request,
        ReturnStatus.APPROVED,
        "admin-1",
        admin_response="Approved, ship it back",
        refund_amount=49.99,
        refund_method=RefundMethod.STORE_CREDIT,
    )

    assert request.status == "approved"
    assert request.processed_by == "admin-1"
    assert request.processed_at.replace(tzinfo=None) == PROCESSED_AT.replace(tzinfo=None)
    assert request.admin_response == "Approved, ship it back"
    assert request.refund_amount == Decimal("49.99")
    assert request.refund_method == "store_credit"


def test_update_status_rejects_unknown_values(db_session):
    service = _service(db_session)
    request = service.create(uuid.uuid4(), "buyer-1", "Wrong size")

    with pytest.raises(ValidationError) as exc_info:
        service.update_status(request, "refunded-twice", "admin-1", refund_method="cash")

    violations = exc_info.value.violations
    assert "Status cannot exceed 20 characters" not in violations
    assert any(v.startswith("Status 'refunded-twice' is not one of") for v in violations)
    assert any(v.startswith("Refund method 'cash' is not one of") for v in violations)
    assert service.get(request.id).status == "pending"


def test_update_status_rejects_overlong_status(db_session):
    service = _service(db_session)
    request = service.create(uuid.uuid4(), "buyer-1", "Wrong size")

    with pytest.raises(ValidationError) as exc_info:
        service.update_status(request, "x" * 21, "admin-1")

    assert "Status cannot exceed 20 characters" in exc_info.value.violations


def test_listing_is_newest_first_and_scoped(db_session):
    service = _service(db_session)
    first = service.create(uuid.uuid4(), "buyer-1", "First")
    second = service.create(uuid.uuid4(), "buyer-2", "Second")
    third = service.create(uuid.uuid4(), "buyer-1", "Third")
    service.update_status(second, "rejected", "admin-1")

    assert [r.id for r in service.list_for_user("buyer-1")] == [third.id, first.id]
    assert [r.id for r in service.list_requests()] == [third.id, second.id, first.id]
    assert [r.id for r in service.list_requests("rejected")] == [second.id]


def test_get_missing_raises_not_found(db_session):
    service = _service(db_session)

    with pytest.raises(NotFoundError, match="Return request not found"):
        service.get(uuid.uuid4())
    with pytest.raises(NotFoundError):
        service.get("bogus")
