import pytest

from weather_viewmodel.models.state import ViewState
from weather_viewmodel.models.weather import WeatherMainInfo, describe_condition


def find_item(**overrides):
    item = {
        "id": 524901,
        "name": "Moscow",
        "coord": {"lat": 55.7522, "lon": 37.6156},
        "main": {"temp": -2.5, "humidity": 80},
        "wind": {"speed": 4.0, "deg": 250},
        "weather": [{"id": 600, "main": "Snow", "description": "light snow", "icon": "13d"}],
    }
    item.update(overrides)
    return item


def test_from_api_response():
    weather = WeatherMainInfo.from_api_response(find_item())
    assert weather.city_id == 524901
    assert weather.city_name == "Moscow"
    assert weather.latitude == 55.7522
    assert weather.temperature_c == -2.5
    assert weather.humidity == 80
    assert weather.windspeed_ms == 4.0
    assert weather.winddirection_deg == 250
    assert weather.weather_code == 600
    assert weather.weather_description == "light snow"
    assert weather.icon == "13d"


def test_from_api_response_falls_back_to_condition_group():
    weather = WeatherMainInfo.from_api_response(
        find_item(weather=[{"id": 801}], wind=None)
    )
    assert weather.weather_description == "Clouds"
    assert weather.windspeed_ms is None
    assert weather.icon is None


def test_from_api_response_missing_main_raises():
    item = find_item()
    del item["main"]
    with pytest.raises(KeyError):
        WeatherMainInfo.from_api_response(item)


@pytest.mark.parametrize(
    "code, description",
    [(211, "Thunderstorm"), (310, "Drizzle"), (502, "Rain"), (800, "Clear sky"), (999, "Unknown")],
)
def test_describe_condition(code, description):
    assert describe_condition(code) == description


def test_view_state_holds_exceptions():
    error = ConnectionError("offline")
    state = ViewState(error=error)
    assert state.error is error
    assert state.loading is False
