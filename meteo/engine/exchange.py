"""
Client Exchange - One request, one reply

State machine:

    IDLE -> REQUEST_SENT -> AWAITING_RESPONSE -> DONE
                 |                 |
                 +-----> FAILED <--+

Input validation happens before any network activity. There are no retries:
a lost request or reply ends the exchange in FAILED once the transport gives
up (receive timeout or socket error).
"""
from typing import Optional, Protocol, Tuple

import structlog

from meteo.engine.codec import CITY_NAME_LEN, decode_response, encode_request
from meteo.exceptions import InvalidInputError, MeteoError
from meteo.models import (
    ExchangeResult,
    ExchangeState,
    MeasurementType,
    Status,
    WeatherResponse,
)

logger = structlog.get_logger()


class DatagramTransport(Protocol):
    def send(self, data: bytes) -> int: ...

    def receive(self) -> bytes: ...


def parse_request_string(text: str) -> Tuple[str, str]:
    """
    Split ``"<type> <city>"`` at the first space.

    Raises:
        InvalidInputError: If either part is missing, the type is not a single
            one-byte character, or the city does not fit in 63 bytes
    """
    type_token, space, city = text.partition(" ")
    if not space:
        raise InvalidInputError(
            "Request must have the form \"type city\"", details={"request": text}
        )
    if not type_token:
        raise InvalidInputError("Request type is empty", details={"request": text})
    if len(type_token) != 1 or ord(type_token) > 0xFF:
        raise InvalidInputError(
            "Request type must be a single character", details={"type": type_token}
        )
    if not city:
        raise InvalidInputError("City name is empty", details={"request": text})

    city_size = len(city.encode("utf-8"))
    if city_size >= CITY_NAME_LEN:
        raise InvalidInputError(
            "City name too long",
            details={"city_bytes": city_size, "limit": CITY_NAME_LEN - 1},
        )
    return type_token, city


def render_response(city: str, response: WeatherResponse) -> str:
    """Console line for a decoded response"""
    outcome = response.outcome
    if outcome == Status.SUCCESS:
        try:
            measurement = MeasurementType(response.echoed_type)
        except ValueError:
            return f"{city}: value = {response.value:.1f}"
        return f"{city}: {measurement.label} = {response.value:.1f}{measurement.unit}"
    if outcome == Status.CITY_NOT_FOUND:
        return "City not available"
    if outcome == Status.INVALID_REQ:
        return "Invalid request"
    return f"Unknown status {response.status}"


class ClientExchange:
    """Drives a single request/response exchange over a datagram transport"""

    def __init__(self, transport: DatagramTransport):
        self.transport = transport
        self.state = ExchangeState.IDLE
        self.city: Optional[str] = None

    def _fail(self, error: MeteoError) -> ExchangeResult:
        self.state = ExchangeState.FAILED
        logger.error(
            "exchange_failed",
            code=error.code.value if error.code else None,
            error=error.message,
            details=error.details,
        )
        return ExchangeResult(
            state=self.state,
            city=self.city,
            error=error.code,
            message=error.message,
        )

    def run(self, request_text: str) -> ExchangeResult:
        if self.state != ExchangeState.IDLE:
            raise RuntimeError(f"Exchange already used (state={self.state.value})")

        try:
            measurement_type, city = parse_request_string(request_text)
        except InvalidInputError as e:
            return self._fail(e)
        self.city = city

        payload = encode_request(measurement_type, city)
        try:
            self.transport.send(payload)
            self.state = ExchangeState.REQUEST_SENT
            logger.debug("request_sent", type=measurement_type, city=city, size=len(payload))

            self.state = ExchangeState.AWAITING_RESPONSE
            data = self.transport.receive()
            response = decode_response(data)
        except MeteoError as e:
            return self._fail(e)

        self.state = ExchangeState.DONE
        logger.debug("response_received", status=response.status, type=response.echoed_type)
        return ExchangeResult(
            state=self.state,
            city=city,
            response=response,
            rendered=render_response(city, response),
        )
