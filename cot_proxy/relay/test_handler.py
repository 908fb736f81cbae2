import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from starlette.datastructures import Headers
from starlette.requests import ClientDisconnect

from cot_proxy.config import ProxyConfig
from cot_proxy.relay.handler import parse_port, relay_request, resolve_destination
from cot_proxy.relay.outcome import (
    BodyReadError,
    RejectReason,
    Rejected,
    Sent,
    UdpSocketError,
)


def _request(headers=None, body=b"hello"):
    return SimpleNamespace(
        headers=Headers(headers=headers or {}),
        body=AsyncMock(return_value=body),
    )


class TestParsePort:
    def test_missing_uses_default(self):
        assert parse_port(None, 8087) == 8087

    @pytest.mark.parametrize("raw,expected", [("4242", 4242), ("+53", 53), ("65535", 65535), ("0", 0)])
    def test_valid_values(self, raw, expected):
        assert parse_port(raw, 8087) == expected

    @pytest.mark.parametrize("raw", ["abc", "", "-1", "65536", "70000", "12.5", "0x50", "1_000"])
    def test_unparseable_falls_back_to_default(self, raw):
        assert parse_port(raw, 8087) == 8087


class TestResolveDestination:
    def test_defaults(self):
        assert resolve_destination(Headers(headers={}), ProxyConfig()) == ("127.0.0.1", 8087)

    def test_header_names_are_case_insensitive(self):
        headers = Headers(headers={"X-UDP-HOST": "10.0.0.5", "x-Udp-Port": "4242"})
        assert resolve_destination(headers, ProxyConfig()) == ("10.0.0.5", 4242)

    def test_configured_defaults(self):
        config = ProxyConfig(default_udp_host="192.168.1.20", default_udp_port=6969)
        assert resolve_destination(Headers(headers={}), config) == ("192.168.1.20", 6969)


@pytest.mark.asyncio
async def test_sends_body_to_default_destination():
    with patch("cot_proxy.relay.udp.send_datagram", return_value=5) as send:
        outcome = await relay_request(_request(), ProxyConfig())

    assert outcome == Sent(destination="127.0.0.1:8087", byte_count=5)
    send.assert_called_once_with(b"hello", "127.0.0.1", 8087)


@pytest.mark.asyncio
async def test_blocked_host_is_rejected_without_reading_body():
    request = _request({"X-UDP-Host": "8.8.8.8"})
    with patch("cot_proxy.relay.udp.send_datagram") as send:
        outcome = await relay_request(request, ProxyConfig(allowed_hosts=("10.0.0.0/24",)))

    assert outcome == Rejected(RejectReason.HOST_NOT_ALLOWED)
    assert outcome.reason.status_code == 403
    send.assert_not_called()
    request.body.assert_not_called()


@pytest.mark.asyncio
async def test_blocked_host_is_logged(caplog):
    request = _request({"X-UDP-Host": "8.8.8.8"})
    with caplog.at_level("WARNING", logger="uvicorn.error"):
        await relay_request(request, ProxyConfig(allowed_hosts=("127.0.0.1",)))

    assert "Blocked UDP destination: 8.8.8.8" in caplog.text


@pytest.mark.asyncio
async def test_port_zero_is_rejected():
    with patch("cot_proxy.relay.udp.send_datagram") as send:
        outcome = await relay_request(_request({"X-UDP-Port": "0"}), ProxyConfig())

    assert outcome == Rejected(RejectReason.INVALID_PORT)
    assert outcome.reason.status_code == 400
    assert outcome.reason.message == "Invalid UDP port number"
    send.assert_not_called()


@pytest.mark.asyncio
async def test_allowlist_checked_before_port():
    request = _request({"X-UDP-Host": "8.8.8.8", "X-UDP-Port": "0"})
    outcome = await relay_request(request, ProxyConfig(allowed_hosts=()))
    assert outcome.reason is RejectReason.HOST_NOT_ALLOWED


@pytest.mark.asyncio
async def test_invalid_port_header_falls_back_to_default():
    with patch("cot_proxy.relay.udp.send_datagram", return_value=5) as send:
        outcome = await relay_request(_request({"X-UDP-Port": "not-a-port"}), ProxyConfig())

    assert outcome.destination == "127.0.0.1:8087"
    send.assert_called_once_with(b"hello", "127.0.0.1", 8087)


@pytest.mark.asyncio
async def test_body_read_failure_raises():
    request = SimpleNamespace(
        headers=Headers(headers={}),
        body=AsyncMock(side_effect=ClientDisconnect()),
    )
    with patch("cot_proxy.relay.udp.send_datagram") as send:
        with pytest.raises(BodyReadError) as exc_info:
            await relay_request(request, ProxyConfig())

    assert exc_info.value.status_code == 500
    assert exc_info.value.message.startswith("Error reading body: ")
    send.assert_not_called()


@pytest.mark.asyncio
async def test_socket_failure_propagates():
    with patch(
        "cot_proxy.relay.udp.send_datagram",
        side_effect=UdpSocketError("Network is unreachable"),
    ):
        with pytest.raises(UdpSocketError) as exc_info:
            await relay_request(_request({"X-UDP-Host": "10.9.9.9"}), ProxyConfig())

    assert exc_info.value.message == "UDP send error: Network is unreachable"


@pytest.mark.asyncio
async def test_each_call_sends_its_own_datagram():
    with patch("cot_proxy.relay.udp.send_datagram", return_value=5) as send:
        first = await relay_request(_request(), ProxyConfig())
        second = await relay_request(_request(), ProxyConfig())

    assert first == second
    assert send.call_count == 2


@pytest.mark.asyncio
async def test_concurrent_relays_each_emit_a_datagram(udp_receiver):
    port = str(udp_receiver.getsockname()[1])
    payloads = [f"<event uid='unit-{i}'/>".encode() for i in range(5)]
    requests = [_request({"X-UDP-Port": port}, body=p) for p in payloads]

    outcomes = await asyncio.gather(
        *(relay_request(r, ProxyConfig()) for r in requests)
    )

    assert all(isinstance(o, Sent) for o in outcomes)
    assert [o.byte_count for o in outcomes] == [len(p) for p in payloads]
    received = [udp_receiver.recvfrom(65535)[0] for _ in payloads]
    assert sorted(received) == sorted(payloads)
