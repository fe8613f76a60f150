"""View model behind the main weather screen.

The view model owns the screen's observable state and turns the outcome of
three use cases (device location, city id lookup, nearby-city weather) into
writes to that state. Each trigger schedules an asyncio task and returns it
right away; the task never raises, failures end up in ``error`` and in the
UI flags.
"""

import asyncio
import time
import uuid
from typing import Awaitable, Callable, Dict, List, Optional, Set

from structlog.contextvars import bind_contextvars, clear_contextvars

from weather_viewmodel.config import FlightPolicy, settings
from weather_viewmodel.logging_config import logger
from weather_viewmodel.metrics import OPERATION_COUNT, OPERATION_LATENCY
from weather_viewmodel.models.location import GeoLocation
from weather_viewmodel.models.state import ViewState
from weather_viewmodel.models.weather import WeatherMainInfo
from weather_viewmodel.use_cases.contracts import (
    CityIdResolver,
    GeoLocationProvider,
    WeatherInfoProvider,
)
from weather_viewmodel.viewmodel.errors import (
    CITY_ID_HANDLERS,
    GEO_LOCATION_HANDLERS,
    WEATHER_HANDLERS,
    ErrorHandlerTable,
)
from weather_viewmodel.viewmodel.observable import (
    EventChannel,
    MutableObservableField,
    ObservableField,
)

GEO_LOCATION = "geo_location"
CITY_ID = "city_id"
WEATHER = "weather"

SUCCESS = "success"
CANCELLED = "cancelled"


class WeatherMainInfoViewModel:
    """State holder for the main weather screen.

    Args:
        get_weather_main_info: Weather provider for cities near a point.
        get_city_id: Resolver from city name to city id.
        get_geo_location: Device location provider.
        flight_policy: How overlapping calls of one operation are scheduled.
            Defaults to the VIEWMODEL_FLIGHT_POLICY setting.
    """

    def __init__(
        self,
        get_weather_main_info: WeatherInfoProvider,
        get_city_id: CityIdResolver,
        get_geo_location: GeoLocationProvider,
        flight_policy: Optional[FlightPolicy] = None,
    ):
        self._get_weather_main_info = get_weather_main_info
        self._get_city_id = get_city_id
        self._get_geo_location = get_geo_location
        self.flight_policy = FlightPolicy(flight_policy or settings.flight_policy)

        self._loading: MutableObservableField[bool] = MutableObservableField("loading", False)
        self._error: MutableObservableField[Optional[BaseException]] = MutableObservableField(
            "error", None
        )
        self._weather_results: MutableObservableField[Optional[List[WeatherMainInfo]]] = (
            MutableObservableField("weather_results", None)
        )
        self._city_id: MutableObservableField[Optional[int]] = MutableObservableField(
            "city_id", None
        )
        self._geo_location: MutableObservableField[Optional[GeoLocation]] = (
            MutableObservableField("geo_location", None)
        )

        # Written by the UI as well, to dismiss the dialog or banner.
        self.show_location_alert_dialog = MutableObservableField(
            "show_location_alert_dialog", False
        )
        self.show_http_error = MutableObservableField("show_http_error", False)
        self.show_internet_connection_error = MutableObservableField(
            "show_internet_connection_error", False
        )

        self.city_resolved: EventChannel[int] = EventChannel("city_resolved")

        self._tasks: Set[asyncio.Task] = set()
        self._in_flight: Dict[str, asyncio.Task] = {}
        self._closed = False

    @property
    def loading(self) -> ObservableField[bool]:
        return self._loading

    @property
    def error(self) -> ObservableField[Optional[BaseException]]:
        return self._error

    @property
    def weather_results(self) -> ObservableField[Optional[List[WeatherMainInfo]]]:
        return self._weather_results

    @property
    def city_id(self) -> ObservableField[Optional[int]]:
        """Resolved city id.

        Set to the id and reset to None within the same operation, so only
        subscribers see the id. Consumers that need it once should read
        ``city_resolved`` instead.
        """
        return self._city_id

    @property
    def geo_location(self) -> ObservableField[Optional[GeoLocation]]:
        return self._geo_location

    @property
    def closed(self) -> bool:
        return self._closed

    def get_user_location(self, permissions_granted: bool) -> Optional[asyncio.Task]:
        """Resolve the device location into ``geo_location``.

        Args:
            permissions_granted: Whether the user granted location permissions.

        Returns:
            The scheduled task, or None when the view model is closed.
        """
        return self._launch(
            GEO_LOCATION,
            lambda: self._load_location(permissions_granted),
            permissions_granted=permissions_granted,
        )

    def get_city_id_by_name(self, city_name: str) -> Optional[asyncio.Task]:
        """Look up the id of a city by name.

        Args:
            city_name: City name, passed through as is.

        Returns:
            The scheduled task, or None when the view model is closed.
        """
        return self._launch(
            CITY_ID, lambda: self._load_city_id(city_name), city=city_name
        )

    def get_nearby_cities(
        self,
        longitude: float,
        latitude: float,
        number_of_cities: int,
        is_local: bool,
    ) -> Optional[asyncio.Task]:
        """Fetch weather for cities around a point into ``weather_results``.

        Args:
            longitude: Longitude of the point.
            latitude: Latitude of the point.
            number_of_cities: How many cities to request.
            is_local: Read from the local data source instead of the remote API.

        Returns:
            The scheduled task, or None when the view model is closed.
        """
        return self._launch(
            WEATHER,
            lambda: self._load_weather(longitude, latitude, number_of_cities, is_local),
            latitude=latitude,
            longitude=longitude,
            count=number_of_cities,
            is_local=is_local,
        )

    def snapshot(self) -> ViewState:
        """Return the current value of every observable field."""
        results = self._weather_results.value
        return ViewState(
            loading=self._loading.value,
            error=self._error.value,
            weather_results=list(results) if results is not None else None,
            city_id=self._city_id.value,
            geo_location=self._geo_location.value,
            show_location_alert_dialog=self.show_location_alert_dialog.value,
            show_http_error=self.show_http_error.value,
            show_internet_connection_error=self.show_internet_connection_error.value,
        )

    async def wait_idle(self) -> None:
        """Wait until every scheduled operation has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel pending operations and stop accepting new ones."""
        if self._closed:
            return
        self._closed = True
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        logger.info("VIEWMODEL_CLOSED", cancelled=len(pending))

    async def __aenter__(self) -> "WeatherMainInfoViewModel":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()
        await self.wait_idle()

    def _launch(
        self,
        operation: str,
        body: Callable[[], Awaitable[str]],
        **log_context,
    ) -> Optional[asyncio.Task]:
        if self._closed:
            logger.warning("VIEWMODEL_CLOSED_TRIGGER_IGNORED", operation=operation)
            return None

        running = self._in_flight.get(operation)
        if running is not None and not running.done():
            if self.flight_policy is FlightPolicy.ignore_if_in_flight:
                logger.info("OPERATION_IN_FLIGHT_IGNORED", operation=operation, **log_context)
                return running
            if self.flight_policy is FlightPolicy.cancel_previous:
                logger.info("OPERATION_REPLACED", operation=operation, **log_context)
                running.cancel()

        task = asyncio.get_running_loop().create_task(
            self._run(operation, body, log_context)
        )
        self._tasks.add(task)
        self._in_flight[operation] = task
        task.add_done_callback(lambda done: self._forget(operation, done))
        return task

    def _forget(self, operation: str, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if self._in_flight.get(operation) is task:
            del self._in_flight[operation]

    async def _run(
        self,
        operation: str,
        body: Callable[[], Awaitable[str]],
        log_context: dict,
    ) -> None:
        bind_contextvars(operation=operation, operation_id=str(uuid.uuid4()))
        start = time.perf_counter()
        outcome = CANCELLED
        try:
            logger.info(f"{operation.upper()}_STARTED", **log_context)
            outcome = await body()
        finally:
            duration_s = time.perf_counter() - start
            logger.info(
                f"{operation.upper()}_FINISHED",
                outcome=outcome,
                duration_ms=round(duration_s * 1000, 2),
            )
            OPERATION_COUNT.labels(operation=operation, outcome=outcome).inc()
            OPERATION_LATENCY.labels(operation=operation).observe(duration_s)
            clear_contextvars()

    def _fail(self, table: ErrorHandlerTable, exc: Exception, **log_context) -> str:
        error_class = table.handle(self, exc)
        self._error.value = exc
        logger.error(
            f"{table.operation.upper()}_FAILED",
            error_class=error_class.value,
            error=str(exc),
            error_type=type(exc).__name__,
            **log_context,
        )
        return error_class.value

    async def _load_location(self, permissions_granted: bool) -> str:
        try:
            location = await self._get_geo_location.resolve(permissions_granted)
        except Exception as exc:
            return self._fail(
                GEO_LOCATION_HANDLERS, exc, permissions_granted=permissions_granted
            )
        self._geo_location.value = location
        return SUCCESS

    async def _load_city_id(self, city_name: str) -> str:
        try:
            self._loading.value = True
            city_id = await self._get_city_id.resolve(city_name)
            self._city_id.value = city_id
            self._city_id.value = None
            self.city_resolved.send(city_id)
            return SUCCESS
        except Exception as exc:
            return self._fail(CITY_ID_HANDLERS, exc, city=city_name)
        finally:
            self._loading.value = False

    async def _load_weather(
        self,
        longitude: float,
        latitude: float,
        number_of_cities: int,
        is_local: bool,
    ) -> str:
        try:
            self._loading.value = True
            results = await self._get_weather_main_info.fetch(
                {
                    "lat": f"{float(latitude)}",
                    "lon": f"{float(longitude)}",
                    "cnt": f"{number_of_cities}",
                },
                is_local,
            )
            self._weather_results.value = list(results)
            return SUCCESS
        except Exception as exc:
            return self._fail(WEATHER_HANDLERS, exc, count=number_of_cities)
        finally:
            self._loading.value = False
