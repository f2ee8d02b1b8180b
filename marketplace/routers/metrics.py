from fastapi import APIRouter, Depends

from marketplace.auth.dependencies import AuthContext, require_admin
from marketplace.db.base import now_utc
from marketplace.observability import metrics_store
from marketplace.schemas.metrics import MetricsResponse

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("", summary="Request metrics", response_model=MetricsResponse)
def metrics_endpoint(
    _auth: AuthContext = Depends(require_admin),
) -> MetricsResponse:
    snapshot = metrics_store.snapshot()
    return MetricsResponse(
        collected_at=now_utc(),
        counters=snapshot.counters,
        timings=snapshot.timings,
    )
