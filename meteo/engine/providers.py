"""
Weather Value Provider

Synthetic stand-in for a real data source. Values are drawn in hundredths
from an injected generator so tests can substitute a fixed sequence.
"""
import random
from typing import Callable, Dict, Optional, Protocol

from meteo.models import MeasurementType


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


# (offset, span in hundredths) per measurement
VALUE_RANGES: Dict[MeasurementType, tuple[float, int]] = {
    MeasurementType.TEMPERATURE: (-10.0, 5000),  # -10.00 .. 39.99 °C
    MeasurementType.HUMIDITY: (20.0, 8000),  # 20.00 .. 99.99 %
    MeasurementType.WIND: (0.0, 10000),  # 0.00 .. 99.99 km/h
    MeasurementType.PRESSURE: (950.0, 10000),  # 950.00 .. 1049.99 hPa
}


class WeatherValueProvider:
    """Bounded pseudo-random values per measurement type"""

    def __init__(self, rng: Optional[RandomSource] = None):
        self.rng = rng if rng is not None else random.Random()
        self._producers: Dict[MeasurementType, Callable[[], float]] = {
            MeasurementType.TEMPERATURE: self.temperature,
            MeasurementType.HUMIDITY: self.humidity,
            MeasurementType.WIND: self.wind,
            MeasurementType.PRESSURE: self.pressure,
        }

    def _draw(self, measurement: MeasurementType) -> float:
        offset, span = VALUE_RANGES[measurement]
        return offset + self.rng.randrange(span) / 100.0

    def temperature(self) -> float:
        return self._draw(MeasurementType.TEMPERATURE)

    def humidity(self) -> float:
        return self._draw(MeasurementType.HUMIDITY)

    def wind(self) -> float:
        return self._draw(MeasurementType.WIND)

    def pressure(self) -> float:
        return self._draw(MeasurementType.PRESSURE)

    def value_for(self, measurement: MeasurementType | str) -> float:
        """
        Produce a value for a measurement.

        Raises:
            ValueError: If the measurement type is unknown
        """
        return self._producers[MeasurementType(measurement)]()
