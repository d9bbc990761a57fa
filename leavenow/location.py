import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

import requests

from .config import Config
from .errors import PositionSourceError, PositionUnavailable
from .telemetry import NullTelemetry

# A ~100m fix comes back in under a second; a precise fix can take ~10s, and
# travel times are rounded to whole minutes anyway.
ACCURACY_HUNDRED_METERS = 100


@dataclass(frozen=True)
class Position:
    latitude: float
    longitude: float

    @property
    def is_complete(self):
        return self.latitude is not None and self.longitude is not None

    def to_dict(self):
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, position_dict):
        return cls(position_dict.get("latitude"), position_dict.get("longitude"))

    def __str__(self):
        return f"{self.latitude},{self.longitude}"


class StaticPositionSource:
    """Always reports the same position, e.g. one given on the command line."""

    def __init__(self, position: Position):
        self.position = position

    def current_position(self, accuracy_meters=ACCURACY_HUNDRED_METERS) -> Position:
        return self.position


class IPGeolocationSource:
    """
    Coarse position from an IP geolocation service. Accuracy is whatever the
    service gives, which is at best the requested tier.
    """

    def __init__(self, url=None, timeout=5):
        self.url = url or Config.GEOLOCATION_URL
        self.timeout = timeout

    def current_position(self, accuracy_meters=ACCURACY_HUNDRED_METERS) -> Position:
        try:
            response = requests.get(self.url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise PositionSourceError(f"Geolocation request failed: {e}")
        if response.status_code != 200:
            raise PositionSourceError(f"Geolocation returned {response.status_code}: {response.text[:200]}")
        try:
            data = response.json()
        except ValueError as e:
            raise PositionSourceError(f"Geolocation returned invalid JSON: {e}")
        return Position(data.get("lat"), data.get("lon"))


class JsonPositionCache:
    """Holds the last known position in a small JSON file."""

    def __init__(self, path=None):
        self.path = path or Config.LOCATION_CACHE_FILE

    def get(self) -> Optional[Position]:
        try:
            with open(self.path, 'r') as f:
                position = Position.from_dict(json.load(f))
        except FileNotFoundError:
            return None
        except (OSError, ValueError, AttributeError) as e:
            logging.warning(f"Could not read cached position from {self.path}: {e}")
            return None
        return position if position.is_complete else None

    def set(self, position: Position):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(position.to_dict(), f)


class LocationProvider:
    """
    Gets the current position from a live source, falling back to the last
    cached position. Every good live fix is written back to the cache.
    """

    def __init__(self, source, cache, accuracy_meters=ACCURACY_HUNDRED_METERS, telemetry=None):
        self.source = source
        self.cache = cache
        self.accuracy_meters = accuracy_meters
        self.telemetry = telemetry or NullTelemetry()

    def get_current_position(self) -> Position:
        with self.telemetry.section("get_current_position") as t:
            position = None
            try:
                position = self.source.current_position(accuracy_meters=self.accuracy_meters)
                t.trace("live position: %s", position)
            except PositionSourceError as e:
                logging.warning(f"Live position unavailable: {e}")

            if position is not None and position.is_complete:
                try:
                    self.cache.set(position)
                except OSError as e:
                    logging.warning(f"Could not cache position: {e}")
                return position

            t.trace("falling back to cached position")
            cached = self.cache.get()
            if cached is None:
                raise PositionUnavailable("No live position and no cached position")
            logging.info(f"Using cached position {cached}")
            return cached
