"""Failure taxonomy for view model operations.

Collaborators fail with arbitrary exceptions. ``classify`` sorts them into
three classes, most specific first, and each operation declares a handler
table saying which UI flags a class of failure raises. A class an operation
has no entry for is handled by that table's GENERIC entry.
"""

import socket
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

import httpx

if TYPE_CHECKING:
    from weather_viewmodel.viewmodel.weather_main_info import WeatherMainInfoViewModel


class WeatherServiceError(Exception):
    """Base exception for use-case failures."""
    pass


class ConnectivityError(WeatherServiceError):
    """Raised when the remote host cannot be reached."""
    pass


class HttpError(WeatherServiceError):
    """Raised when the remote API answers with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ErrorClass(str, Enum):
    """Classes of failure, in the order they are matched."""

    connectivity = "connectivity"
    protocol = "protocol"
    generic = "generic"


CONNECTIVITY_ERRORS = (
    ConnectivityError,
    socket.gaierror,
    httpx.ConnectError,
    httpx.ConnectTimeout,
)
PROTOCOL_ERRORS = (HttpError, httpx.HTTPStatusError)


def classify(exc: BaseException) -> ErrorClass:
    """Return the most specific class matching an exception.

    Args:
        exc: The exception caught at an operation boundary.

    Returns:
        The ErrorClass of the failure.
    """
    if isinstance(exc, CONNECTIVITY_ERRORS):
        return ErrorClass.connectivity
    if isinstance(exc, PROTOCOL_ERRORS):
        return ErrorClass.protocol
    return ErrorClass.generic


FlagHandler = Callable[["WeatherMainInfoViewModel"], None]


class ErrorHandlerTable:
    """Maps error classes to the flag updates one operation performs."""

    def __init__(self, operation: str, handlers: Dict[ErrorClass, FlagHandler]):
        if ErrorClass.generic not in handlers:
            raise ValueError(f"{operation} handler table needs a generic entry")
        self.operation = operation
        self.handlers = handlers

    def resolve(self, exc: BaseException) -> ErrorClass:
        """Return the class this table handles an exception as."""
        error_class = classify(exc)
        return error_class if error_class in self.handlers else ErrorClass.generic

    def handle(self, view_model: "WeatherMainInfoViewModel", exc: BaseException) -> ErrorClass:
        """Run the handler for an exception against a view model.

        Returns:
            The ErrorClass that was applied.
        """
        error_class = self.resolve(exc)
        self.handlers[error_class](view_model)
        return error_class


def _no_flags(view_model: "WeatherMainInfoViewModel") -> None:
    return None


def _show_internet_connection_error(view_model: "WeatherMainInfoViewModel") -> None:
    view_model.show_internet_connection_error.value = True


def _hide_http_error(view_model: "WeatherMainInfoViewModel") -> None:
    # Known anomaly: the HTTP failure branch writes False, not True.
    # Kept for behavioural parity; the UI never gets a True here.
    view_model.show_http_error.value = False


CITY_ID_HANDLERS = ErrorHandlerTable(
    "city_id",
    {
        ErrorClass.connectivity: _show_internet_connection_error,
        ErrorClass.protocol: _hide_http_error,
        ErrorClass.generic: _no_flags,
    },
)

# No protocol entry: HTTP failures while fetching weather are generic.
WEATHER_HANDLERS = ErrorHandlerTable(
    "weather",
    {
        ErrorClass.connectivity: _no_flags,
        ErrorClass.generic: _no_flags,
    },
)

GEO_LOCATION_HANDLERS = ErrorHandlerTable(
    "geo_location",
    {ErrorClass.generic: _no_flags},
)
