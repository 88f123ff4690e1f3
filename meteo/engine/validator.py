"""
Request Validator - Server-side classification of decoded requests

Checks run in a fixed order and the first match wins:

1. unknown measurement type            -> INVALID_REQ
2. empty city                          -> CITY_NOT_FOUND
3. disallowed character in the city    -> INVALID_REQ if it holds @ # $ %,
                                          CITY_NOT_FOUND otherwise
4. city of 64 bytes or more            -> INVALID_REQ
5. city outside the supported list     -> CITY_NOT_FOUND
6. otherwise                           -> SUCCESS
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from meteo.engine.codec import CITY_NAME_LEN
from meteo.models import MeasurementType, Status, WeatherRequest

SUPPORTED_CITIES = (
    "bari",
    "roma",
    "milano",
    "napoli",
    "torino",
    "palermo",
    "genova",
    "bologna",
    "firenze",
    "venezia",
)

_ALLOWED_PUNCTUATION = frozenset(b" '-")
_SPECIAL_CHARACTERS = frozenset(b"@#$%")


@dataclass(frozen=True)
class Verdict:
    """Validation outcome; ``measurement`` is set only on SUCCESS."""

    status: Status
    measurement: Optional[MeasurementType] = None
    reason: str = ""

    @property
    def is_success(self) -> bool:
        return self.status == Status.SUCCESS


def is_allowed_city_byte(byte: int) -> bool:
    """ASCII letters, space, apostrophe, hyphen, or any byte >= 0x80."""
    if byte >= 0x80:
        return True
    if 0x41 <= byte <= 0x5A or 0x61 <= byte <= 0x7A:
        return True
    return byte in _ALLOWED_PUNCTUATION


def cities_match(city: bytes, candidate: bytes) -> bool:
    """ASCII case-insensitive exact comparison."""
    return len(city) == len(candidate) and city.lower() == candidate.lower()


class RequestValidator:
    """Classify requests against the measurement set and the city list"""

    def __init__(self, supported_cities: Iterable[str] = SUPPORTED_CITIES):
        self.supported_cities = tuple(
            city.encode("utf-8") for city in supported_cities
        )

    def is_supported_city(self, city: bytes) -> bool:
        return any(cities_match(city, candidate) for candidate in self.supported_cities)

    def validate(self, request: WeatherRequest) -> Verdict:
        try:
            measurement = MeasurementType(request.measurement_type)
        except ValueError:
            return Verdict(Status.INVALID_REQ, reason="unknown_type")

        city = request.city
        if not city:
            return Verdict(Status.CITY_NOT_FOUND, reason="empty_city")

        if not all(is_allowed_city_byte(byte) for byte in city):
            if any(byte in _SPECIAL_CHARACTERS for byte in city):
                return Verdict(Status.INVALID_REQ, reason="special_characters")
            return Verdict(Status.CITY_NOT_FOUND, reason="disallowed_characters")

        if len(city) >= CITY_NAME_LEN:
            return Verdict(Status.INVALID_REQ, reason="city_too_long")

        if not self.is_supported_city(city):
            return Verdict(Status.CITY_NOT_FOUND, reason="unsupported_city")

        return Verdict(Status.SUCCESS, measurement=measurement)
