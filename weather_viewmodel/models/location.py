"""Device location model."""

from pydantic import BaseModel


class GeoLocation(BaseModel):
    """Latitude/longitude pair returned by the geolocation provider."""

    latitude: float
    longitude: float
