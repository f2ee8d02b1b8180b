from fastapi import APIRouter, Depends, Query, status

from marketplace.auth.dependencies import AuthContext, get_auth_context, require_fulfillment_write
from marketplace.config import api_prefix
from marketplace.dependencies import get_shipping_manager
from marketplace.schemas.envelope import Envelope, ErrorEnvelope, ListEnvelope, ok, ok_list
from marketplace.schemas.shipping import (
    ShippingRecordCreate,
    ShippingRecordResponse,
    ShippingRecordUpdate,
    ShippingStatusUpdate,
    TrackingEventCreate,
)
from marketplace.services.shipping_service import ShippingLifecycleManager

router = APIRouter(prefix=f"{api_prefix()}/shipping", tags=["shipping"])

ShippingEnvelope = Envelope[ShippingRecordResponse]

_WRITE_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorEnvelope},
    status.HTTP_404_NOT_FOUND: {"model": ErrorEnvelope},
}


@router.post(
    "",
    response_model=ShippingEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create shipping record",
    responses={status.HTTP_409_CONFLICT: {"model": ErrorEnvelope}, **_WRITE_RESPONSES},
)
def create_shipping_record_endpoint(
    payload: ShippingRecordCreate,
    manager: ShippingLifecycleManager = Depends(get_shipping_manager),
    _auth: AuthContext = Depends(require_fulfillment_write),
) -> ShippingEnvelope:
    record = manager.create(
        payload.order_id,
        payload.shipping_address,
        carrier=payload.carrier,
        tracking_number=payload.tracking_number,
        estimated_arrival=payload.estimated_arrival,
        notes=payload.notes,
    )
    return ok(ShippingRecordResponse, record)


@router.get(
    "",
    response_model=ListEnvelope[ShippingRecordResponse],
    summary="List shipping records",
)
def list_shipping_records_endpoint(
    status_filter: str | None = Query(default=None, alias="status"),
    manager: ShippingLifecycleManager = Depends(get_shipping_manager),
    _auth: AuthContext = Depends(require_fulfillment_write),
) -> ListEnvelope[ShippingRecordResponse]:
    return ok_list(ShippingRecordResponse, manager.list_records(status_filter))


@router.get(
    "/order/{order_id}",
    response_model=ShippingEnvelope,
    summary="Get shipping record for an order",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorEnvelope}},
)
def get_shipping_by_order_endpoint(
    order_id: str,
    manager: ShippingLifecycleManager = Depends(get_shipping_manager),
    _auth: AuthContext = Depends(get_auth_context),
) -> ShippingEnvelope:
    return ok(ShippingRecordResponse, manager.get_by_order(order_id))


@router.get(
    "/{record_id}",
    response_model=ShippingEnvelope,
    summary="Get shipping record",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorEnvelope}},
)
def get_shipping_record_endpoint(
    record_id: str,
    manager: ShippingLifecycleManager = Depends(get_shipping_manager),
    _auth: AuthContext = Depends(require_fulfillment_write),
) -> ShippingEnvelope:
    return ok(ShippingRecordResponse, manager.get(record_id))


@router.patch(
    "/{record_id}",
    response_model=ShippingEnvelope,
    summary="Update shipping details",
    responses=_WRITE_RESPONSES,
)
def update_shipping_record_endpoint(
    record_id: str,
    payload: ShippingRecordUpdate,
    manager: ShippingLifecycleManager = Depends(get_shipping_manager),
    _auth: AuthContext = Depends(require_fulfillment_write),
) -> ShippingEnvelope:
    record = manager.get(record_id)
    return ok(ShippingRecordResponse, manager.update_details(record, payload))


@router.post(
    "/{record_id}/status",
    response_model=ShippingEnvelope,
    summary="Update shipping status",
    responses=_WRITE_RESPONSES,
)
def update_shipping_status_endpoint(
    record_id: str,
    payload: ShippingStatusUpdate,
    manager: ShippingLifecycleManager = Depends(get_shipping_manager),
    _auth: AuthContext = Depends(require_fulfillment_write),
) -> ShippingEnvelope:
    record = manager.get(record_id)
    updated = manager.update_status(record, payload.status, payload.history_entry)
    return ok(ShippingRecordResponse, updated)


@router.post(
    "/{record_id}/tracking",
    response_model=ShippingEnvelope,
    summary="Append tracking event",
    responses=_WRITE_RESPONSES,
)
def append_tracking_event_endpoint(
    record_id: str,
    payload: TrackingEventCreate,
    manager: ShippingLifecycleManager = Depends(get_shipping_manager),
    _auth: AuthContext = Depends(require_fulfillment_write),
) -> ShippingEnvelope:
    record = manager.get(record_id)
    return ok(ShippingRecordResponse, manager.append_tracking_event(record, payload))
