from fastapi import APIRouter, Depends, status

from marketplace.config import api_prefix
from marketplace.dependencies import get_category_service
from marketplace.observability import observe_timing
from marketplace.schemas.category import CategoryResponse
from marketplace.schemas.envelope import Envelope, ErrorEnvelope, ListEnvelope, ok, ok_list
from marketplace.services.category_service import CategoryService

router = APIRouter(prefix=f"{api_prefix()}/categories", tags=["categories"])

_ERROR_RESPONSES = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorEnvelope},
}


@router.get(
    "",
    response_model=ListEnvelope[CategoryResponse],
    summary="List active categories",
    responses=_ERROR_RESPONSES,
)
def list_categories_endpoint(
    service: CategoryService = Depends(get_category_service),
) -> ListEnvelope[CategoryResponse]:
    with observe_timing("category_list_seconds"):
        categories = service.list_active()
    return ok_list(CategoryResponse, categories)


@router.get(
    "/{category_id}",
    response_model=Envelope[CategoryResponse],
    summary="Get category",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorEnvelope}, **_ERROR_RESPONSES},
)
def get_category_endpoint(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
) -> Envelope[CategoryResponse]:
    return ok(CategoryResponse, service.get_by_id(category_id))
