import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from cot_proxy.config import ProxyConfig, get_proxy_config
from cot_proxy.models import ErrorResponse, HealthResponse, SuccessResponse
from cot_proxy.relay.handler import relay_request
from cot_proxy.relay.outcome import Rejected

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

ALL_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"]


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorResponse(error=message).model_dump()
    )


def not_found_response() -> JSONResponse:
    return error_response(404, "Not found")


@router.options("/{path:path}")
async def preflight(path: str):
    """CORS preflight for any path; headers are added by the app middleware."""
    return Response(status_code=200)


@router.get("/")
async def health(config: ProxyConfig = Depends(get_proxy_config)):
    return HealthResponse(
        service=config.service_name, version=config.service_version
    ).model_dump()


@router.post("/cot")
async def relay_cot(request: Request, config: ProxyConfig = Depends(get_proxy_config)):
    outcome = await relay_request(request, config)
    if isinstance(outcome, Rejected):
        return error_response(outcome.reason.status_code, outcome.reason.message)
    return SuccessResponse(
        destination=outcome.destination, size=outcome.byte_count
    ).model_dump()


# Registered last so every other method/path combination ends up here
@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def not_found(request: Request, path: str):
    logger.debug(f"[Router] No route for {request.method} {request.url.path}")
    return not_found_response()
