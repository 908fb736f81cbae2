# Ensure tests import the package from this checkout first.
import os
import socket
import sys

import pytest

SERVICE_ROOT = os.path.dirname(__file__)

if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)


@pytest.fixture
def udp_receiver():
    """Loopback UDP socket standing in for the downstream CoT consumer."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


@pytest.fixture
def make_client():
    """Build a TestClient around a fresh app with the given allowlist."""
    from fastapi.testclient import TestClient

    from cot_proxy.config import ProxyConfig
    from cot_proxy.server import create_app

    def _make(allowed_hosts=None, raise_server_exceptions=True, **overrides):
        config = ProxyConfig(
            allowed_hosts=tuple(allowed_hosts) if allowed_hosts is not None else None,
            **overrides,
        )
        return TestClient(
            create_app(config, metrics_enabled=False),
            raise_server_exceptions=raise_server_exceptions,
        )

    return _make
