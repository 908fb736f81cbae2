import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import Info
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from cot_proxy.config import ProxyConfig
from cot_proxy.models import ErrorResponse
from cot_proxy.relay.outcome import RelayError
from cot_proxy.routes import error_response, not_found_response, router
from cot_proxy.utils.exception_logging import log_exception_with_details
from cot_proxy.vars import (
    METRICS_ENABLED,
    OTLP_ENDPOINT,
    OTLP_HEADERS,
    SERVICE_NAME,
    SERVICE_VERSION,
)

logger = logging.getLogger("uvicorn.error")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, X-UDP-Host, X-UDP-Port",
}


def _configure_tracing() -> None:
    trace.set_tracer_provider(
        TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
    )
    if OTLP_ENDPOINT:
        otlp_exporter = OTLPSpanExporter(
            endpoint=OTLP_ENDPOINT,
            headers=OTLP_HEADERS or None,
        )
        trace.get_tracer_provider().add_span_processor(
            BatchSpanProcessor(otlp_exporter)
        )
        logger.info(f"[Startup] Exporting traces to {OTLP_ENDPOINT}")


_configure_tracing()

app_info = Info("cot_proxy_app", "Application Info")
app_info.info({"app_name": SERVICE_NAME, "version": SERVICE_VERSION})


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # Methods outside the catch-all route surface as 405; report them as 404
    if exc.status_code in (404, 405):
        return not_found_response()
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the middleware stack, so CORS headers are set here as well
    log_exception_with_details(logger, "[Router]", exc)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal server error").model_dump(),
        headers=CORS_HEADERS,
    )


def create_app(
    config: Optional[ProxyConfig] = None, metrics_enabled: bool = METRICS_ENABLED
) -> FastAPI:
    """Build the proxy application around a single immutable configuration."""
    if config is None:
        config = ProxyConfig.from_env()
    app = FastAPI(
        title=config.service_name,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.proxy_config = config

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # /metrics has to be registered before the router's catch-all 404 route
    if metrics_enabled:
        Instrumentator().instrument(app).expose(app, include_in_schema=False)

    FastAPIInstrumentor.instrument_app(app, excluded_urls="metrics")

    app.include_router(router)
    return app


app = create_app()
