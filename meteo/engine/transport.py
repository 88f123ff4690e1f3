"""
Transport Layer

Blocking UDP sockets for the weather client and server, plus the host name
helpers used for console and log output. Socket errors are translated into
the TransportError hierarchy so callers never see raw OSError.
"""
import socket
from typing import Optional, Tuple

import structlog

from meteo.exceptions import (
    BindError,
    ReceiveError,
    ReceiveTimeoutError,
    ResolutionError,
    SendError,
    TransportError,
)

logger = structlog.get_logger()

Address = Tuple[str, int]


def resolve_host(name: str) -> str:
    """
    Resolve a host name to an IPv4 address string.

    Raises:
        ResolutionError: If the name cannot be resolved
    """
    try:
        return socket.gethostbyname(name)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionError(
            f"Cannot resolve host {name!r}",
            details={"host": name, "error": str(e)},
        )


def reverse_lookup(ip: str, fallback: Optional[str] = None) -> str:
    """Host name for an address, or ``fallback`` (default: the address itself)."""
    try:
        hostname, _, _ = socket.gethostbyaddr(ip)
        return hostname
    except (socket.herror, socket.gaierror, OSError) as e:
        logger.debug("reverse_lookup_failed", ip=ip, error=str(e))
        return fallback if fallback is not None else ip


class UDPClientTransport:
    """
    Datagram socket bound to a single server address.

    Sends one request and blocks for one reply. ``timeout_sec`` of None or 0
    waits forever.
    """

    def __init__(
        self,
        host: str,
        port: int,
        timeout_sec: Optional[float] = None,
        buffer_size: int = 512,
        sock: Optional[socket.socket] = None,
    ):
        self.host = host
        self.port = port
        self.timeout_sec = timeout_sec or None
        self.buffer_size = buffer_size
        self.sock = sock
        try:
            if self.sock is None:
                self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            self.sock.settimeout(self.timeout_sec)
        except (OSError, OverflowError, ValueError) as e:
            if self.sock is not None and sock is None:
                self.sock.close()
            raise TransportError(
                f"Cannot set up UDP socket for {host}:{port}",
                details={"error": str(e), "timeout_sec": timeout_sec},
            )

    @property
    def address(self) -> Address:
        return self.host, self.port

    def send(self, data: bytes) -> int:
        try:
            sent = self.sock.sendto(data, self.address)
        except (OSError, OverflowError) as e:
            raise SendError(
                f"Failed to send datagram to {self.host}:{self.port}",
                details={"error": str(e), "data_size": len(data)},
            )
        if sent != len(data):
            raise SendError(
                f"Short write to {self.host}:{self.port}",
                details={"sent": sent, "data_size": len(data)},
            )
        return sent

    def receive(self) -> bytes:
        try:
            data, _ = self.sock.recvfrom(self.buffer_size)
        except socket.timeout:
            raise ReceiveTimeoutError(
                f"No reply from {self.host}:{self.port} within {self.timeout_sec}s",
                details={"timeout_sec": self.timeout_sec},
            )
        except OSError as e:
            raise ReceiveError(
                f"Failed to receive reply from {self.host}:{self.port}",
                details={"error": str(e)},
            )
        return data

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> "UDPClientTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class UDPServerTransport:
    """Datagram socket listening on every interface (by default)"""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 56700,
        buffer_size: int = 512,
        sock: Optional[socket.socket] = None,
    ):
        self.host = host
        self.port = port
        self.buffer_size = buffer_size
        self.sock = sock

    def bind(self) -> Address:
        """
        Create and bind the socket.

        Returns:
            The bound address (the real port when ``port`` is 0)

        Raises:
            BindError: If the socket cannot be created or bound
        """
        try:
            if self.sock is None:
                self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            self.sock.bind((self.host, self.port))
        except (OSError, OverflowError) as e:
            if self.sock is not None:
                self.sock.close()
                self.sock = None
            raise BindError(
                f"Cannot bind UDP socket on {self.host}:{self.port}",
                details={"error": str(e)},
            )
        self.host, self.port = self.sock.getsockname()[:2]
        return self.host, self.port

    def receive(self) -> Tuple[bytes, Address]:
        if self.sock is None:
            raise ReceiveError("Socket not bound", details={"host": self.host, "port": self.port})
        try:
            return self.sock.recvfrom(self.buffer_size)
        except OSError as e:
            raise ReceiveError("recvfrom failed", details={"error": str(e)})

    def send_to(self, data: bytes, address: Address) -> int:
        if self.sock is None:
            raise SendError("Socket not bound", details={"host": self.host, "port": self.port})
        try:
            return self.sock.sendto(data, address)
        except (OSError, OverflowError) as e:
            raise SendError(
                f"Failed to send reply to {address[0]}:{address[1]}",
                details={"error": str(e), "data_size": len(data)},
            )

    def close(self) -> None:
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def __enter__(self) -> "UDPServerTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
