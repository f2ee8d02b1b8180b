import uuid
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.db.base import now_utc
from marketplace.errors import NotFoundError, StorageError, ValidationError
from marketplace.models.return_request import (
    REFUND_METHOD_VALUES,
    RETURN_STATUS_MAX_LENGTH,
    RETURN_STATUS_VALUES,
    RefundMethod,
    ReturnRequest,
    ReturnStatus,
)
from marketplace.observability import log_event
from marketplace.schemas.returns import ReturnImage, ReturnShipping
from marketplace.services.identifiers import parse_id


class ReturnRequestService:
    def __init__(self, db: Session, clock: Callable[[], datetime] = now_utc) -> None:
        self.db = db
        self.clock = clock

    def create(
        self,
        order_id: uuid.UUID,
        user_id: str,
        reason: str,
        images: list[ReturnImage] | None = None,
        return_shipping: ReturnShipping | None = None,
    ) -> ReturnRequest:
        request = ReturnRequest(
            order_id=order_id,
            user_id=user_id,
            reason=reason,
            status=ReturnStatus.PENDING.value,
            images=[image.model_dump() for image in images or []],
            refund_amount=Decimal("0"),
            return_shipping=return_shipping.model_dump() if return_shipping else None,
        )
        request = self._save(request)
        log_event(
            "return_request_created",
            order_id=str(request.order_id),
            record_id=str(request.id),
            user_id=request.user_id,
        )
        return request

    def update_status(
        self,
        request: ReturnRequest,
        new_status: ReturnStatus | str,
        processed_by: str,
        *,
        admin_response: str | None = None,
        refund_amount: float | Decimal | None = None,
        refund_method: RefundMethod | str | None = None,
    ) -> ReturnRequest:
        """Apply an admin decision; any enumerated status is accepted from any other."""
        status = new_status.value if isinstance(new_status, ReturnStatus) else new_status
        request.status = status
        request.processed_by = processed_by
        request.processed_at = self.clock()
        if admin_response is not None:
            request.admin_response = admin_response
        if refund_amount is not None:
            request.refund_amount = Decimal(str(refund_amount))
        if refund_method is not None:
            request.refund_method = (
                refund_method.value if isinstance(refund_method, RefundMethod) else refund_method
            )

        request = self._save(request)
        log_event(
            f"return_request_{status}",
            order_id=str(request.order_id),
            record_id=str(request.id),
            user_id=processed_by,
        )
        return request

    def validate(self, request: ReturnRequest) -> None:
        violations = []
        if request.order_id is None:
            violations.append("Order id is required")
        if not (request.user_id or "").strip():
            violations.append("User id is required")
        if not (request.reason or "").strip():
            violations.append("Return reason is required")

        status = request.status
        if status is None:
            violations.append("Status is required")
        else:
            if len(status) > RETURN_STATUS_MAX_LENGTH:
                violations.append(f"Status cannot exceed {RETURN_STATUS_MAX_LENGTH} characters")
            if status not in RETURN_STATUS_VALUES:
                allowed = ", ".join(s.value for s in ReturnStatus)
                violations.append(f"Status '{status}' is not one of: {allowed}")

        if request.refund_method is not None and request.refund_method not in REFUND_METHOD_VALUES:
            allowed = ", ".join(m.value for m in RefundMethod)
            violations.append(f"Refund method '{request.refund_method}' is not one of: {allowed}")

        if violations:
            raise ValidationError(violations)

    def get(self, request_id: str | uuid.UUID) -> ReturnRequest:
        key = parse_id(request_id, "Return request")
        try:
            request = self.db.get(ReturnRequest, key)
        except SQLAlchemyError as exc:
            raise StorageError("Error fetching return request", str(exc)) from exc
        if request is None:
            raise NotFoundError("Return request")
        return request

    def list_for_user(self, user_id: str) -> list[ReturnRequest]:
        return self._fetch_all(select(ReturnRequest).where(ReturnRequest.user_id == user_id))

    def list_requests(self, status: ReturnStatus | str | None = None) -> list[ReturnRequest]:
        query = select(ReturnRequest)
        if status:
            value = status.value if isinstance(status, ReturnStatus) else status
            query = query.where(ReturnRequest.status == value)
        return self._fetch_all(query)

    def _fetch_all(self, query) -> list[ReturnRequest]:
        try:
            return list(self.db.scalars(query.order_by(ReturnRequest.created_at.desc())))
        except SQLAlchemyError as exc:
            raise StorageError("Error fetching return requests", str(exc)) from exc

    def _save(self, request: ReturnRequest) -> ReturnRequest:
        try:
            self.validate(request)
        except ValidationError:
            self.db.rollback()
            raise

        self.db.add(request)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Error saving return request", str(exc)) from exc
        self.db.refresh(request)
        return request
