from fastapi import APIRouter, Depends, HTTPException, Query, status

from marketplace.auth.dependencies import (
    AuthContext,
    get_auth_context,
    require_admin,
    require_roles,
)
from marketplace.config import api_prefix
from marketplace.dependencies import get_return_service
from marketplace.schemas.envelope import Envelope, ErrorEnvelope, ListEnvelope, ok, ok_list
from marketplace.schemas.returns import (
    ReturnProcessRequest,
    ReturnRequestCreate,
    ReturnRequestResponse,
)
from marketplace.services.returns_service import ReturnRequestService

router = APIRouter(prefix=f"{api_prefix()}/returns", tags=["returns"])

ReturnEnvelope = Envelope[ReturnRequestResponse]
ReturnListEnvelope = ListEnvelope[ReturnRequestResponse]


@router.post(
    "",
    response_model=ReturnEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Request a return",
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorEnvelope}},
)
def create_return_request_endpoint(
    payload: ReturnRequestCreate,
    service: ReturnRequestService = Depends(get_return_service),
    auth: AuthContext = Depends(require_roles("BUYER")),
) -> ReturnEnvelope:
    request = service.create(
        payload.order_id,
        auth.user_id,
        payload.reason,
        images=payload.images,
        return_shipping=payload.return_shipping,
    )
    return ok(ReturnRequestResponse, request)


@router.get("/mine", response_model=ReturnListEnvelope, summary="List my return requests")
def list_my_return_requests_endpoint(
    service: ReturnRequestService = Depends(get_return_service),
    auth: AuthContext = Depends(get_auth_context),
) -> ReturnListEnvelope:
    return ok_list(ReturnRequestResponse, service.list_for_user(auth.user_id))


@router.get("", response_model=ReturnListEnvelope, summary="List return requests")
def list_return_requests_endpoint(
    status_filter: str | None = Query(default=None, alias="status"),
    service: ReturnRequestService = Depends(get_return_service),
    _auth: AuthContext = Depends(require_admin),
) -> ReturnListEnvelope:
    return ok_list(ReturnRequestResponse, service.list_requests(status_filter))


@router.get(
    "/{request_id}",
    response_model=ReturnEnvelope,
    summary="Get return request",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorEnvelope}},
)
def get_return_request_endpoint(
    request_id: str,
    service: ReturnRequestService = Depends(get_return_service),
    auth: AuthContext = Depends(get_auth_context),
) -> ReturnEnvelope:
    request = service.get(request_id)
    if not auth.is_admin and request.user_id != auth.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your return request")
    return ok(ReturnRequestResponse, request)


@router.post(
    "/{request_id}/process",
    response_model=ReturnEnvelope,
    summary="Process return request",
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorEnvelope},
        status.HTTP_404_NOT_FOUND: {"model": ErrorEnvelope},
    },
)
def process_return_request_endpoint(
    request_id: str,
    payload: ReturnProcessRequest,
    service: ReturnRequestService = Depends(get_return_service),
    auth: AuthContext = Depends(require_admin),
) -> ReturnEnvelope:
    request = service.get(request_id)
    updated = service.update_status(
        request,
        payload.status,
        auth.user_id,
        admin_response=payload.admin_response,
        refund_amount=payload.refund_amount,
        refund_method=payload.refund_method,
    )
    return ok(ReturnRequestResponse, updated)
