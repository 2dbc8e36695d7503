"""Open-Meteo current-conditions client."""

import logging
from dataclasses import dataclass

import httpx

from coffee_guide.catalog import HUMIDITY_MAX, HUMIDITY_MIN, TEMPERATURE_MAX, TEMPERATURE_MIN
from coffee_guide.engine import round_half_away
from coffee_guide.errors import WeatherError
from coffee_guide.presets import PresetStore, SetHumidity, SetTemperature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Conditions:
    temperature: int  # °C
    humidity: int     # %


@dataclass
class OpenMeteoClient:
    """HTTPX-backed Open-Meteo client."""

    base_url: str
    http_client: httpx.Client
    timeout: float = 10.0

    @classmethod
    def create(cls, base_url: str, timeout: float = 10.0) -> "OpenMeteoClient":
        """Create a client with its own httpx session."""
        return cls(base_url=base_url, http_client=httpx.Client(), timeout=timeout)

    def current(self, latitude: float, longitude: float) -> Conditions:
        """Fetch current temperature (rounded to whole °C) and relative humidity."""
        try:
            response = self.http_client.get(
                self.base_url,
                params={
                    "latitude": latitude,
                    "longitude": longitude,
                    "current": "temperature_2m,relative_humidity_2m",
                    "timezone": "auto",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            current = response.json()["current"]
            return Conditions(
                temperature=int(round_half_away(float(current["temperature_2m"]))),
                humidity=int(round_half_away(float(current["relative_humidity_2m"]))),
            )
        except httpx.HTTPError as exc:
            logger.warning("weather request failed: %s", exc)
            raise WeatherError("could not fetch current weather") from exc
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("unexpected weather payload: %s", exc)
            raise WeatherError("unexpected weather response") from exc

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.http_client.close()


def _clamp(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


def apply_conditions(store: PresetStore, preset_id: str, conditions: Conditions) -> bool:
    """
    Feed fetched conditions into a preset through the normal update path.
    Values are clamped to the ranges the engine accepts.
    """
    temperature = _clamp(conditions.temperature, TEMPERATURE_MIN, TEMPERATURE_MAX)
    humidity = _clamp(conditions.humidity, HUMIDITY_MIN, HUMIDITY_MAX)
    if (temperature, humidity) != (conditions.temperature, conditions.humidity):
        logger.info("clamped weather %s to %s°C / %s%%", conditions, temperature, humidity)

    if not store.update(preset_id, SetTemperature(temperature)):
        return False
    return store.update(preset_id, SetHumidity(humidity))
