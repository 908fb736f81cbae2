from dataclasses import dataclass
from enum import Enum
from typing import Union


class RejectReason(str, Enum):
    HOST_NOT_ALLOWED = "host_not_allowed"
    INVALID_PORT = "invalid_port"

    @property
    def status_code(self) -> int:
        return 403 if self is RejectReason.HOST_NOT_ALLOWED else 400

    @property
    def message(self) -> str:
        if self is RejectReason.HOST_NOT_ALLOWED:
            return (
                "UDP destination not allowed. "
                "Configure ALLOWED_UDP_HOSTS environment variable."
            )
        return "Invalid UDP port number"


@dataclass(frozen=True)
class Sent:
    destination: str
    byte_count: int


@dataclass(frozen=True)
class Rejected:
    reason: RejectReason


RelayOutcome = Union[Sent, Rejected]


class RelayError(Exception):
    """A relay that failed for reasons outside the client's control."""

    status_code = 500
    prefix = "Relay error"

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"{self.prefix}: {cause}")

    @property
    def message(self) -> str:
        return str(self)


class BodyReadError(RelayError):
    prefix = "Error reading body"


class UdpSocketError(RelayError):
    prefix = "UDP send error"


class UdpSocketCreateError(UdpSocketError):
    prefix = "Error creating UDP socket"
