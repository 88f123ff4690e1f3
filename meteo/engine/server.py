"""
Weather Server Loop

Listening -> Processing -> Listening, one datagram at a time. Only failing to
create or bind the socket is fatal; receive and send errors are logged and
the loop goes back to listening.
"""
from typing import Callable, Optional

import structlog

from meteo.engine.request_handler import HandledRequest, RequestHandler
from meteo.engine.transport import Address, UDPServerTransport, reverse_lookup
from meteo.exceptions import ReceiveError, SendError

logger = structlog.get_logger()


class WeatherServer:
    """Blocking single-socket weather server"""

    def __init__(
        self,
        transport: UDPServerTransport,
        handler: Optional[RequestHandler] = None,
        resolve_client: Callable[[str], str] = reverse_lookup,
    ):
        self.transport = transport
        self.handler = handler or RequestHandler()
        self.resolve_client = resolve_client
        self.running = False

    def serve_once(self) -> Optional[HandledRequest]:
        """
        Run one Listening -> Processing cycle.

        Returns:
            The handled request, or None when nothing was answered
        """
        try:
            data, address = self.transport.receive()
        except ReceiveError as e:
            logger.error("receive_failed", error=e.message, details=e.details)
            return None

        client_ip = address[0]
        client_host = self.resolve_client(client_ip)

        handled = self.handler.handle(data)
        if handled is None:
            logger.warning(
                "request_dropped",
                client_host=client_host,
                client_ip=client_ip,
                size=len(data),
            )
            return None

        request = handled.request
        logger.info(
            "request_received",
            client_host=client_host,
            client_ip=client_ip,
            type=request.measurement_type,
            city=request.city_text,
        )
        self._reply(handled, address)
        return handled

    def _reply(self, handled: HandledRequest, address: Address) -> None:
        payload = handled.payload
        try:
            sent = self.transport.send_to(payload, address)
        except SendError as e:
            logger.error("send_failed", error=e.message, details=e.details)
            return

        if sent != len(payload):
            logger.error("send_short_write", sent=sent, expected=len(payload))
            return

        logger.info(
            "response_sent",
            client_ip=address[0],
            status=handled.verdict.status.name,
            value=handled.value,
        )

    def serve_forever(self) -> None:
        """Process requests until stop() is called or the process is interrupted."""
        self.running = True
        logger.info("server_listening", host=self.transport.host, port=self.transport.port)
        try:
            while self.running:
                self.serve_once()
        except KeyboardInterrupt:
            logger.info("server_interrupted")
        finally:
            self.running = False

    def stop(self) -> None:
        self.running = False
