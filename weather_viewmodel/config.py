"""Environment-driven settings for the view model layer."""

import os
from dataclasses import dataclass
from enum import Enum


class FlightPolicy(str, Enum):
    """How overlapping calls of the same operation kind are scheduled."""

    concurrent = "concurrent"
    cancel_previous = "cancel_previous"
    ignore_if_in_flight = "ignore_if_in_flight"


@dataclass(frozen=True)
class Settings:
    """Settings read once from the environment."""

    log_level: str
    log_format: str
    flight_policy: FlightPolicy


def load_settings() -> Settings:
    """Build settings from environment variables.

    Returns:
        A Settings instance.

    Raises:
        ValueError: If VIEWMODEL_FLIGHT_POLICY is not a known policy.
    """
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_format=os.getenv("LOG_FORMAT", "console").lower(),
        flight_policy=FlightPolicy(
            os.getenv("VIEWMODEL_FLIGHT_POLICY", FlightPolicy.concurrent.value).lower()
        ),
    )


settings = load_settings()
