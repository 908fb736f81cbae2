import asyncio
import logging
import re
from typing import Mapping, Optional

from opentelemetry import trace
from prometheus_client import Counter
from starlette.requests import Request

from cot_proxy.allowlist import is_allowed
from cot_proxy.config import ProxyConfig
from cot_proxy.relay import udp
from cot_proxy.relay.outcome import (
    BodyReadError,
    RejectReason,
    Rejected,
    RelayError,
    RelayOutcome,
    Sent,
)
from cot_proxy.utils import format_destination
from cot_proxy.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)
from cot_proxy.utils.traced_requests import traced_relay

logger = logging.getLogger("uvicorn.error")
tracer = trace.get_tracer(__name__)

UDP_HOST_HEADER = "x-udp-host"
UDP_PORT_HEADER = "x-udp-port"

# Unsigned 16-bit decimal, optional leading plus sign
_PORT_PATTERN = re.compile(r"^\+?[0-9]+$")
_MAX_PORT = 65535

RELAY_TOTAL = Counter(
    "cot_proxy_relay_total", "Relay attempts by outcome", ["outcome"]
)
RELAY_BYTES = Counter(
    "cot_proxy_relay_bytes_total", "Payload bytes forwarded over UDP"
)


def parse_port(raw: Optional[str], default: int) -> int:
    """Parse a port header value, silently falling back to ``default``."""
    if raw is None:
        return default
    value = raw.strip()
    if not _PORT_PATTERN.match(value):
        return default
    port = int(value)
    if port > _MAX_PORT:
        return default
    return port


def resolve_destination(
    headers: Mapping[str, str], config: ProxyConfig
) -> tuple[str, int]:
    host = headers.get(UDP_HOST_HEADER)
    if host is None:
        host = config.default_udp_host
    port = parse_port(headers.get(UDP_PORT_HEADER), config.default_udp_port)
    return host, port


async def relay_request(request: Request, config: ProxyConfig) -> RelayOutcome:
    """
    Forward the body of ``request`` as one UDP datagram.

    Client mistakes come back as ``Rejected``; failures reading the body or
    using the socket are raised as ``RelayError`` subclasses.
    """
    host, port = resolve_destination(request.headers, config)
    destination = format_destination(host, port)

    with traced_relay(
        tracer,
        operation="relay_cot",
        destination=destination,
        start_message=f"[Relay] Relay requested to {destination}",
    ) as span:
        if not is_allowed(host, config.allowed_hosts):
            logger.warning(
                f"[Relay] Blocked UDP destination: {host} (not in allowlist)"
            )
            span.set_attribute("relay.outcome", RejectReason.HOST_NOT_ALLOWED.value)
            RELAY_TOTAL.labels(outcome=RejectReason.HOST_NOT_ALLOWED.value).inc()
            return Rejected(RejectReason.HOST_NOT_ALLOWED)

        if port < 1:
            logger.warning(f"[Relay] Invalid UDP port: {port}")
            span.set_attribute("relay.outcome", RejectReason.INVALID_PORT.value)
            RELAY_TOTAL.labels(outcome=RejectReason.INVALID_PORT.value).inc()
            return Rejected(RejectReason.INVALID_PORT)

        try:
            try:
                body = await request.body()
            except Exception as e:
                raise BodyReadError(format_exception_message(e)) from e

            span.set_attribute("udp.payload_size", len(body))
            await asyncio.to_thread(udp.send_datagram, body, host, port)
        except RelayError as e:
            log_exception_with_details(logger, "[Relay]", e, include_traceback=False)
            span.set_attribute("relay.outcome", "error")
            span.set_attribute("relay.error", e.message)
            RELAY_TOTAL.labels(outcome="error").inc()
            raise

        logger.info(
            f"[Relay] Forwarded CoT message to {destination} ({len(body)} bytes)"
        )
        span.set_attribute("relay.outcome", "sent")
        RELAY_TOTAL.labels(outcome="sent").inc()
        RELAY_BYTES.inc(len(body))
        return Sent(destination=destination, byte_count=len(body))
