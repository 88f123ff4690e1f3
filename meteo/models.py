"""
Core data models
"""
from enum import Enum, IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Status(IntEnum):
    """Response status carried in the first four bytes of a response"""

    SUCCESS = 0
    CITY_NOT_FOUND = 1
    INVALID_REQ = 2


class MeasurementType(str, Enum):
    """Measurement selected by the request type byte"""

    TEMPERATURE = "t"
    HUMIDITY = "h"
    WIND = "w"
    PRESSURE = "p"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def unit(self) -> str:
        return _UNITS[self]


_LABELS = {
    MeasurementType.TEMPERATURE: "Temperature",
    MeasurementType.HUMIDITY: "Humidity",
    MeasurementType.WIND: "Wind",
    MeasurementType.PRESSURE: "Pressure",
}

_UNITS = {
    MeasurementType.TEMPERATURE: "°C",
    MeasurementType.HUMIDITY: "%",
    MeasurementType.WIND: " km/h",
    MeasurementType.PRESSURE: " hPa",
}


class ErrorCode(str, Enum):
    """Failure classes reported outside the protocol statuses"""

    MALFORMED = "malformed"
    TRUNCATED = "truncated"
    INVALID_INPUT = "invalid_input"
    TRANSPORT_ERROR = "transport_error"


class ExchangeState(str, Enum):
    """Client exchange lifecycle"""

    IDLE = "idle"
    REQUEST_SENT = "request_sent"
    AWAITING_RESPONSE = "awaiting_response"
    DONE = "done"
    FAILED = "failed"


def _single_byte_char(value: str) -> str:
    if len(value) != 1 or ord(value) > 0xFF:
        raise ValueError("type must be a single one-byte character")
    return value


class WeatherRequest(BaseModel):
    """
    Client request: one type character followed by the city bytes.

    The city is kept as raw bytes. Bytes >= 0x80 are accepted by the
    validator without being decoded, so no text decoding happens here.
    """

    model_config = ConfigDict(frozen=True)

    measurement_type: str
    city: bytes = b""

    @field_validator("measurement_type")
    @classmethod
    def check_measurement_type(cls, value: str) -> str:
        return _single_byte_char(value)

    @property
    def city_text(self) -> str:
        return self.city.decode("utf-8", errors="replace")


class WeatherResponse(BaseModel):
    """
    Server response with a fixed 9-byte wire layout.

    ``status`` is a plain integer because decoded responses are not
    validated: a peer may send a status outside the known set.
    """

    model_config = ConfigDict(frozen=True)

    status: int
    echoed_type: str = "\x00"
    value: float = 0.0

    @field_validator("echoed_type")
    @classmethod
    def check_echoed_type(cls, value: str) -> str:
        return _single_byte_char(value)

    @property
    def outcome(self) -> Optional[Status]:
        try:
            return Status(self.status)
        except ValueError:
            return None

    @property
    def is_success(self) -> bool:
        return self.status == Status.SUCCESS


class ExchangeResult(BaseModel):
    """Final outcome of one client exchange"""

    state: ExchangeState
    city: Optional[str] = None
    response: Optional[WeatherResponse] = None
    error: Optional[ErrorCode] = None
    message: Optional[str] = None
    rendered: Optional[str] = Field(
        default=None, description="Human-readable line printed by the client"
    )

    @property
    def ok(self) -> bool:
        return self.state == ExchangeState.DONE
