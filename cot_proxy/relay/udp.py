"""
One-shot UDP sender.

Every call binds a fresh socket to an OS-assigned port, emits exactly one
datagram and closes the socket. There is no pooling, queueing or retry.
"""

import socket

from cot_proxy.relay.outcome import UdpSocketCreateError, UdpSocketError
from cot_proxy.utils.exception_logging import format_exception_message

BIND_ADDRESS = ("0.0.0.0", 0)


def send_datagram(payload: bytes, host: str, port: int) -> int:
    """
    Send ``payload`` as a single datagram to ``host:port``.

    Returns the number of bytes handed to the kernel. Raises
    UdpSocketCreateError when the socket cannot be created or bound and
    UdpSocketError when the send fails (including name resolution and an
    empty host, which the socket layer would otherwise treat as INADDR_ANY).
    """
    if not host:
        raise UdpSocketError("invalid socket address: empty host")

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as e:
        raise UdpSocketCreateError(format_exception_message(e)) from e

    with sock:
        try:
            sock.bind(BIND_ADDRESS)
        except OSError as e:
            raise UdpSocketCreateError(format_exception_message(e)) from e
        try:
            return sock.sendto(payload, (host, port))
        except (OSError, UnicodeError) as e:
            raise UdpSocketError(format_exception_message(e)) from e
