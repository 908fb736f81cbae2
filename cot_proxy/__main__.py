import logging

import uvicorn

from cot_proxy.config import ProxyConfig
from cot_proxy.vars import HOST, LOG_LEVEL, PORT

logger = logging.getLogger("uvicorn.error")


def startup_banner(config: ProxyConfig, port: int) -> list[str]:
    lines = [
        "==============================================",
        f"  {config.service_name} {config.service_version}",
        "==============================================",
        f"  HTTP Server listening on port {port}",
        f"  Endpoint: http://localhost:{port}/cot",
        "",
        "  Security:",
    ]
    if config.allowed_hosts is not None:
        lines.append(f"    Allowed UDP destinations: {', '.join(config.allowed_hosts)}")
    else:
        lines.append("    All UDP destinations allowed (development mode)")
        lines.append("    Set ALLOWED_UDP_HOSTS env var for production")
    lines += [
        "",
        "  Usage:",
        "    POST /cot with headers:",
        "      X-UDP-Host: <destination-ip>",
        "      X-UDP-Port: <destination-port>",
        "      Content-Type: application/xml",
        "",
        "  Press Ctrl+C to stop",
        "==============================================",
    ]
    return lines


def main() -> None:
    from cot_proxy.server import app

    logging.basicConfig(level=LOG_LEVEL.upper())
    for line in startup_banner(app.state.proxy_config, PORT):
        logger.info(line)
    if app.state.proxy_config.development_mode:
        logger.warning(
            "[Startup] No ALLOWED_UDP_HOSTS configured, relaying to any destination"
        )
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL)


if __name__ == "__main__":
    main()
