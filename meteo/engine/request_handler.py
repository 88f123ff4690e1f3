"""
Request Handler - One server processing step

Takes the bytes of one received datagram and returns the response to send,
or None when nothing should be sent. No sockets are involved, so the whole
server decision path can be exercised directly in tests.
"""
from dataclasses import dataclass
from typing import Optional

import structlog

from meteo.engine.codec import decode_request, encode_response
from meteo.engine.providers import WeatherValueProvider
from meteo.engine.validator import RequestValidator, Verdict
from meteo.exceptions import MalformedRequestError
from meteo.models import Status, WeatherRequest

logger = structlog.get_logger()


@dataclass(frozen=True)
class HandledRequest:
    """Decoded request, its verdict and the encoded reply"""

    request: WeatherRequest
    verdict: Verdict
    value: float
    payload: bytes


class RequestHandler:
    """Decode, validate, produce and encode"""

    def __init__(
        self,
        validator: Optional[RequestValidator] = None,
        provider: Optional[WeatherValueProvider] = None,
    ):
        self.validator = validator or RequestValidator()
        self.provider = provider or WeatherValueProvider()

    def handle(self, data: bytes, received_len: Optional[int] = None) -> Optional[HandledRequest]:
        try:
            request = decode_request(data, received_len)
        except MalformedRequestError as e:
            logger.warning("request_malformed", error=e.message, **e.details)
            return None

        verdict = self.validator.validate(request)
        value = 0.0
        if verdict.is_success:
            value = self.provider.value_for(verdict.measurement)

        payload = encode_response(verdict.status, request.measurement_type, value)

        logger.debug(
            "request_processed",
            type=request.measurement_type,
            city=request.city_text,
            status=verdict.status.name,
            reason=verdict.reason or None,
            value=value if verdict.status == Status.SUCCESS else None,
        )
        return HandledRequest(request=request, verdict=verdict, value=value, payload=payload)
