"""Point-in-time snapshot of the view model's observable state."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from weather_viewmodel.models.location import GeoLocation
from weather_viewmodel.models.weather import WeatherMainInfo


class ViewState(BaseModel):
    """Values of every observable field at the moment of the snapshot."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    loading: bool = False
    error: Optional[BaseException] = None
    weather_results: Optional[List[WeatherMainInfo]] = None
    city_id: Optional[int] = None
    geo_location: Optional[GeoLocation] = None
    show_location_alert_dialog: bool = False
    show_http_error: bool = False
    show_internet_connection_error: bool = False
