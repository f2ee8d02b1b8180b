import logging
import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.config import allowed_origins, ensure_secure_runtime_settings, settings
from marketplace.db.migration_check import assert_db_is_up_to_date, maybe_create_schema
from marketplace.db.session import engine
from marketplace.errors import MarketplaceError, ValidationError
from marketplace.observability import (
    configure_logging,
    get_logger,
    log_event,
    metrics_store,
    set_request_id,
)
from marketplace.routers.categories import router as categories_router
from marketplace.routers.health import router as health_router
from marketplace.routers.metrics import router as metrics_router
from marketplace.routers.returns import router as returns_router
from marketplace.routers.shipping import router as shipping_router
from marketplace.schemas.envelope import error_body
from marketplace.services.seed import seed_categories


@asynccontextmanager
async def lifespan(_app: FastAPI):
    import marketplace.models  # noqa: F401 (register all SQLAlchemy models)

    configure_logging(settings.log_level)
    ensure_secure_runtime_settings()
    if settings.require_migrations:
        assert_db_is_up_to_date(engine)
    else:
        maybe_create_schema(engine)
    if settings.app_mode == "demo":
        with Session(engine) as db:
            seed_categories(db)
    log_event(f"startup:{settings.app_mode}")
    yield


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Categories, shipping records and return requests for the marketplace",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    set_request_id(request_id)

    start = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start

    response.headers["X-Request-ID"] = request_id
    metrics_store.increment("http_requests_total")
    metrics_store.increment(f"http_responses_{response.status_code // 100}xx_total")
    metrics_store.observe("http_request_duration_seconds", elapsed)
    log_event(f"http_request:{request.method} {request.url.path} {response.status_code}")
    return response


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(_request: Request, exc: MarketplaceError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    log_event(f"request_failed:{type(exc).__name__}:{exc}", level=level)
    violations = exc.violations if isinstance(exc, ValidationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error, violations),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    violations = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_body("Validation failed", "; ".join(violations), violations),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    get_logger().error("Unhandled error", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", str(exc)),
    )


app.include_router(health_router)
app.include_router(categories_router)
app.include_router(shipping_router)
app.include_router(returns_router)
app.include_router(metrics_router)
