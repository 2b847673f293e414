"""HTTP surface for payment records."""

from contextlib import asynccontextmanager
from time import perf_counter
from urllib.parse import quote
from uuid import uuid4

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from payrec.common.auth import ApiKeyMiddleware
from payrec.common.config import settings
from payrec.common.db import Base, SessionLocal, engine
from payrec.common.errors import PaymentError
from payrec.common.logging import configure_logging, logger, trace_id_ctx
from payrec.common.metrics import http_request_duration_seconds, http_requests_total, metrics_response
from payrec.common.startup import log_startup_config
from payrec.common.tracing import instrument_app, setup_tracing
from payrec.services.payments.schemas import (
    PaymentCreateRequest,
    PaymentResponse,
    RefundRequest,
    StatusUpdateRequest,
)
from payrec.services.payments.service import PaymentService

configure_logging()
setup_tracing(settings.service_name)
log_startup_config(
    settings,
    ["service_name", "environment", "database_url", "api_key", "api_prefix", "create_schema", "otel_enabled"],
)
service = PaymentService(SessionLocal, settings.service_name)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Create tables on startup when running without migrations."""

    if settings.create_schema:
        Base.metadata.create_all(engine)
    yield


app = FastAPI(title="Payments API", lifespan=lifespan)
instrument_app(app)
app.add_middleware(ApiKeyMiddleware, api_key=settings.api_key)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Bind a trace id and record request count and latency for every HTTP call."""

    trace_id = request.headers.get("x-trace-id") or str(uuid4())
    trace_id_ctx.set(trace_id)
    start = perf_counter()
    route = request.url.path
    method = request.method
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        route_obj = request.scope.get("route")
        if route_obj is not None and getattr(route_obj, "path", None):
            route = route_obj.path
        response.headers["x-trace-id"] = trace_id
        return response
    finally:
        elapsed = max(0.0, perf_counter() - start)
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(elapsed)
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()


@app.exception_handler(PaymentError)
async def payment_error_handler(_: Request, exc: PaymentError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.name, "detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError):
    """Report malformed input as 400 rather than FastAPI's default 422."""

    logger.warning("request_validation_failed: %s", exc.errors())
    return JSONResponse(
        status_code=400,
        content={"error": "ValidationError", "detail": jsonable_encoder(exc.errors())},
    )


router = APIRouter(prefix=f"{settings.api_prefix}/payments", tags=["payments"])


@router.post("", response_model=PaymentResponse, status_code=201)
def create_payment(req: PaymentCreateRequest, response: Response):
    """Create a payment in `PENDING`; 409 when the external id already exists."""

    payment = service.create_payment(req.external_id, req.amount, req.currency, req.description)
    response.headers["Location"] = f"{router.prefix}/{quote(payment.external_id, safe='')}"
    return PaymentResponse.model_validate(payment)


@router.get("", response_model=list[PaymentResponse])
def list_payments():
    return [PaymentResponse.model_validate(p) for p in service.list_all()]


@router.get("/{external_id}", response_model=PaymentResponse)
def get_payment(external_id: str):
    return PaymentResponse.model_validate(service.get_by_external_id(external_id))


@router.patch("/{external_id}/status", response_model=PaymentResponse)
def update_status(external_id: str, req: StatusUpdateRequest):
    """Overwrite the payment status with any known value."""

    return PaymentResponse.model_validate(service.update_status(external_id, req.status))


@router.post("/{external_id}/refund", response_model=PaymentResponse)
def refund_payment(external_id: str, req: RefundRequest):
    """Refund an authorized or captured payment, closing it as `REFUNDED`."""

    return PaymentResponse.model_validate(service.refund(external_id, req.amount, req.reason))


app.include_router(router)


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"ok": True}
