from .outcome import (
    BodyReadError,
    RejectReason,
    Rejected,
    RelayError,
    RelayOutcome,
    Sent,
    UdpSocketCreateError,
    UdpSocketError,
)

__all__ = [
    "BodyReadError",
    "RejectReason",
    "Rejected",
    "RelayError",
    "RelayOutcome",
    "Sent",
    "UdpSocketCreateError",
    "UdpSocketError",
]
