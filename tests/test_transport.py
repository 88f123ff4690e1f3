"""
Tests for the UDP transports.

Uses real sockets on the loopback interface with ephemeral ports.
"""
import socket
import threading
from unittest.mock import MagicMock, patch

import pytest

from meteo.engine.exchange import ClientExchange
from meteo.engine.providers import WeatherValueProvider
from meteo.engine.request_handler import RequestHandler
from meteo.engine.server import WeatherServer
from meteo.engine.transport import (
    UDPClientTransport,
    UDPServerTransport,
    resolve_host,
    reverse_lookup,
)
from meteo.exceptions import (
    BindError,
    ReceiveError,
    ReceiveTimeoutError,
    ResolutionError,
    SendError,
    TransportError,
)
from meteo.models import ErrorCode, ExchangeState, Status


class FixedRandom:
    def randrange(self, stop: int) -> int:
        return 2500


@pytest.fixture
def server_transport():
    transport = UDPServerTransport(host="127.0.0.1", port=0)
    transport.bind()
    yield transport
    transport.close()


class TestUDPServerTransport:
    def test_bind_reports_ephemeral_port(self, server_transport):
        assert server_transport.host == "127.0.0.1"
        assert server_transport.port > 0

    def test_bind_conflict_raises(self, server_transport):
        other = UDPServerTransport(host="127.0.0.1", port=server_transport.port)
        with pytest.raises(BindError) as exc_info:
            other.bind()
        assert exc_info.value.code == ErrorCode.TRANSPORT_ERROR
        assert other.sock is None

    def test_datagram_round_trip(self, server_transport):
        with UDPClientTransport("127.0.0.1", server_transport.port, timeout_sec=2.0) as client:
            client.send(b"troma\x00")
            data, address = server_transport.receive()
            assert data == b"troma\x00"

            server_transport.send_to(b"reply", address)
            assert client.receive() == b"reply"

    def test_receive_error_is_wrapped(self):
        sock = MagicMock()
        sock.recvfrom.side_effect = OSError("boom")
        transport = UDPServerTransport(sock=sock)
        with pytest.raises(ReceiveError):
            transport.receive()

    def test_send_error_is_wrapped(self):
        sock = MagicMock()
        sock.sendto.side_effect = OSError("boom")
        transport = UDPServerTransport(sock=sock)
        with pytest.raises(SendError):
            transport.send_to(b"x", ("127.0.0.1", 9))

    def test_out_of_range_port_is_bind_error(self):
        transport = UDPServerTransport(host="127.0.0.1", port=70000)
        with pytest.raises(BindError):
            transport.bind()
        assert transport.sock is None

    def test_unbound_socket_raises(self):
        transport = UDPServerTransport(host="127.0.0.1", port=0)
        with pytest.raises(ReceiveError):
            transport.receive()
        with pytest.raises(SendError):
            transport.send_to(b"x", ("127.0.0.1", 9))

    def test_send_to_out_of_range_port(self, server_transport):
        with pytest.raises(SendError):
            server_transport.send_to(b"x", ("127.0.0.1", 70000))


class TestUDPClientTransport:
    def test_receive_timeout(self, server_transport):
        with UDPClientTransport("127.0.0.1", server_transport.port, timeout_sec=0.05) as client:
            client.send(b"tbari\x00")
            with pytest.raises(ReceiveTimeoutError):
                client.receive()

    def test_zero_timeout_blocks_forever(self):
        sock = MagicMock()
        transport = UDPClientTransport("127.0.0.1", 9, timeout_sec=0, sock=sock)
        assert transport.timeout_sec is None
        sock.settimeout.assert_called_once_with(None)

    def test_short_write_is_send_error(self):
        sock = MagicMock()
        sock.sendto.return_value = 2
        transport = UDPClientTransport("127.0.0.1", 9, sock=sock)
        with pytest.raises(SendError):
            transport.send(b"troma\x00")

    def test_send_to_out_of_range_port(self):
        with UDPClientTransport("127.0.0.1", 70000, timeout_sec=0.05) as client:
            with pytest.raises(SendError):
                client.send(b"troma\x00")

    def test_negative_timeout_is_transport_error(self):
        with pytest.raises(TransportError) as exc_info:
            UDPClientTransport("127.0.0.1", 9, timeout_sec=-1)
        assert exc_info.value.code == ErrorCode.TRANSPORT_ERROR

    def test_socket_creation_failure_is_wrapped(self):
        with patch("socket.socket", side_effect=OSError("too many open files")):
            with pytest.raises(TransportError):
                UDPClientTransport("127.0.0.1", 9)

    def test_exchange_fails_on_out_of_range_port(self):
        with UDPClientTransport("127.0.0.1", 70000, timeout_sec=0.05) as client:
            result = ClientExchange(client).run("t roma")
        assert result.state == ExchangeState.FAILED
        assert result.error == ErrorCode.TRANSPORT_ERROR


class TestHostResolution:
    def test_resolve_literal_address(self):
        assert resolve_host("127.0.0.1") == "127.0.0.1"

    def test_resolve_failure(self):
        with patch("socket.gethostbyname", side_effect=socket.gaierror("no such host")):
            with pytest.raises(ResolutionError):
                resolve_host("weather.invalid")

    def test_reverse_lookup_name(self):
        with patch("socket.gethostbyaddr", return_value=("meteo.local", [], ["10.0.0.1"])):
            assert reverse_lookup("10.0.0.1") == "meteo.local"

    def test_reverse_lookup_falls_back_to_ip(self):
        with patch("socket.gethostbyaddr", side_effect=socket.herror("unknown host")):
            assert reverse_lookup("10.0.0.1") == "10.0.0.1"
            assert reverse_lookup("10.0.0.1", fallback="weather") == "weather"


def test_end_to_end_over_loopback(server_transport):
    handler = RequestHandler(provider=WeatherValueProvider(FixedRandom()))
    server = WeatherServer(server_transport, handler, resolve_client=lambda ip: ip)
    worker = threading.Thread(target=server.serve_once, daemon=True)
    worker.start()

    with UDPClientTransport("127.0.0.1", server_transport.port, timeout_sec=2.0) as client:
        result = ClientExchange(client).run("t roma")

    worker.join(timeout=2.0)
    assert result.state == ExchangeState.DONE
    assert result.response.status == Status.SUCCESS
    assert result.response.value == 15.0
    assert result.rendered == "roma: Temperature = 15.0°C"
