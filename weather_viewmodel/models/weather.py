"""Nearby-city weather model and condition code helpers."""

from typing import Optional

from pydantic import BaseModel

CONDITION_GROUP_MAP = {
    2: "Thunderstorm",
    3: "Drizzle",
    5: "Rain",
    6: "Snow",
    7: "Atmosphere",
    8: "Clouds",
}


def describe_condition(code: int) -> str:
    """Return a human readable description for a condition code.

    Args:
        code: Three digit condition id (e.g. 501, 800).

    Returns:
        The description of the code's group, "Clear sky" for 800, or "Unknown".
    """
    if code == 800:
        return "Clear sky"
    return CONDITION_GROUP_MAP.get(code // 100, "Unknown")


class WeatherMainInfo(BaseModel):
    """Weather summary for a single city near the requested point."""

    city_id: int
    city_name: str
    latitude: float
    longitude: float
    temperature_c: float
    humidity: Optional[int] = None
    windspeed_ms: Optional[float] = None
    winddirection_deg: Optional[int] = None
    weather_code: int
    weather_description: str
    icon: Optional[str] = None

    @classmethod
    def from_api_response(cls, item: dict) -> "WeatherMainInfo":
        """Create a WeatherMainInfo from one entry of a nearby-cities payload.

        Args:
            item: A single element of the payload's ``list`` array.

        Returns:
            A populated WeatherMainInfo model.
        """
        main = item["main"]
        coord = item["coord"]
        wind = item.get("wind") or {}
        condition = (item.get("weather") or [{}])[0]
        code = condition.get("id", 0)
        return cls(
            city_id=item["id"],
            city_name=item["name"],
            latitude=coord["lat"],
            longitude=coord["lon"],
            temperature_c=main["temp"],
            humidity=main.get("humidity"),
            windspeed_ms=wind.get("speed"),
            winddirection_deg=wind.get("deg"),
            weather_code=code,
            weather_description=condition.get("description") or describe_condition(code),
            icon=condition.get("icon"),
        )
