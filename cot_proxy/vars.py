import os
from typing import Optional

SERVICE_NAME = os.getenv("SERVICE_NAME", "CoT UDP Proxy")
SERVICE_VERSION = os.getenv("SERVICE_VERSION", "1.0.0")

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8080"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "info").lower()

DEFAULT_UDP_HOST = os.environ.get("DEFAULT_UDP_HOST", "127.0.0.1")
DEFAULT_UDP_PORT = int(os.environ.get("DEFAULT_UDP_PORT", "8087"))


def _parse_allowed_hosts(raw: Optional[str]) -> Optional[list[str]]:
    # Unset means no restriction; set but empty means nothing is allowed
    if raw is None:
        return None
    return [h.strip() for h in raw.split(",") if h.strip()]


ALLOWED_UDP_HOSTS = _parse_allowed_hosts(os.environ.get("ALLOWED_UDP_HOSTS"))

METRICS_ENABLED = os.getenv("METRICS_ENABLED", "true").lower() == "true"

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")
