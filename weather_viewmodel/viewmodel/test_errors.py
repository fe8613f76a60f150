import socket

import httpx
import pytest

from weather_viewmodel.viewmodel.errors import (
    CITY_ID_HANDLERS,
    WEATHER_HANDLERS,
    ConnectivityError,
    ErrorClass,
    ErrorHandlerTable,
    HttpError,
    classify,
)
from weather_viewmodel.viewmodel.weather_main_info import WeatherMainInfoViewModel


def http_status_error() -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.example.test/find")
    response = httpx.Response(404, request=request)
    return httpx.HTTPStatusError("not found", request=request, response=response)


@pytest.mark.parametrize(
    "exc, expected",
    [
        (ConnectivityError("offline"), ErrorClass.connectivity),
        (socket.gaierror("Name or service not known"), ErrorClass.connectivity),
        (httpx.ConnectError("refused"), ErrorClass.connectivity),
        (httpx.ConnectTimeout("timed out"), ErrorClass.connectivity),
        (HttpError("Not found", status_code=404), ErrorClass.protocol),
        (http_status_error(), ErrorClass.protocol),
        (httpx.ReadTimeout("slow"), ErrorClass.generic),
        (ValueError("bad payload"), ErrorClass.generic),
    ],
)
def test_classify(exc, expected):
    assert classify(exc) == expected


def test_http_error_keeps_status_code():
    assert HttpError("Server error", status_code=500).status_code == 500


def test_weather_table_treats_protocol_as_generic():
    assert WEATHER_HANDLERS.resolve(HttpError("Not found")) == ErrorClass.generic
    assert WEATHER_HANDLERS.resolve(ConnectivityError("offline")) == ErrorClass.connectivity


def test_city_id_table_keeps_protocol():
    assert CITY_ID_HANDLERS.resolve(http_status_error()) == ErrorClass.protocol


def test_table_requires_generic_entry():
    with pytest.raises(ValueError):
        ErrorHandlerTable("broken", {ErrorClass.connectivity: lambda view_model: None})


def test_city_id_table_updates_view_model_flags():
    view_model = WeatherMainInfoViewModel(None, None, None)
    view_model.show_http_error.value = True

    assert CITY_ID_HANDLERS.handle(view_model, ConnectivityError("offline")) == ErrorClass.connectivity
    assert CITY_ID_HANDLERS.handle(view_model, HttpError("Not found")) == ErrorClass.protocol

    assert view_model.show_internet_connection_error.value is True
    assert view_model.show_http_error.value is False
