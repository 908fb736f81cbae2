from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from cot_proxy import vars as env


@dataclass(frozen=True)
class ProxyConfig:
    """Process-wide proxy settings, built once at startup and shared read-only."""

    allowed_hosts: Optional[tuple[str, ...]] = None
    service_name: str = "CoT UDP Proxy"
    service_version: str = "1.0.0"
    default_udp_host: str = "127.0.0.1"
    default_udp_port: int = 8087

    @classmethod
    def from_env(cls) -> "ProxyConfig":
        allowed = env.ALLOWED_UDP_HOSTS
        return cls(
            allowed_hosts=tuple(allowed) if allowed is not None else None,
            service_name=env.SERVICE_NAME,
            service_version=env.SERVICE_VERSION,
            default_udp_host=env.DEFAULT_UDP_HOST,
            default_udp_port=env.DEFAULT_UDP_PORT,
        )

    @property
    def development_mode(self) -> bool:
        return self.allowed_hosts is None


def get_proxy_config(request: Request) -> ProxyConfig:
    return request.app.state.proxy_config
