"""Interfaces of the use cases the view model depends on."""

from typing import Dict, Protocol, Sequence

from weather_viewmodel.models.location import GeoLocation
from weather_viewmodel.models.weather import WeatherMainInfo


class GeoLocationProvider(Protocol):
    """Resolves the device location."""

    async def resolve(self, permissions_granted: bool) -> GeoLocation:
        """Return the current location; raise when denied or unavailable."""
        ...


class CityIdResolver(Protocol):
    """Looks up a city id by name."""

    async def resolve(self, city_name: str) -> int:
        ...


class WeatherInfoProvider(Protocol):
    """Fetches weather for cities around a point."""

    async def fetch(
        self, params: Dict[str, str], is_local: bool
    ) -> Sequence[WeatherMainInfo]:
        """Return weather for up to ``params["cnt"]`` cities.

        Args:
            params: Request payload with ``lat``, ``lon`` and ``cnt`` keys.
            is_local: Whether to read from the local data source instead of
                the remote API.
        """
        ...
