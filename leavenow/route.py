import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from .telemetry import NullTelemetry

NO_ROUTE_NAME = "none"
NOTHING_TO_TRACK = "No where to go..."
MAPS_API_ERROR = "Maps API error"


@dataclass(frozen=True)
class Route:
    """A candidate route and its travel time in traffic."""
    name: str
    travel_time_seconds: int
    is_error = False


@dataclass(frozen=True)
class RouteError:
    """Stands in for the candidate list when the directions provider fails."""
    provider_status: Optional[str]
    provider_message: Optional[str] = None
    name = "error"
    is_error = True


@dataclass(frozen=True)
class RouteInfo:
    route_name: str
    route_time_seconds: int
    destination_name: str
    arrival_target_time: Optional[datetime] = None
    arrival_estimate: Optional[datetime] = None

    def __post_init__(self):
        if (self.arrival_target_time is None) != (self.arrival_estimate is None):
            raise ValueError("arrival_target_time and arrival_estimate must be set together")

    @classmethod
    def nothing_to_track(cls):
        return cls(NO_ROUTE_NAME, 0, NOTHING_TO_TRACK)

    @classmethod
    def provider_error(cls):
        return cls(NO_ROUTE_NAME, 0, MAPS_API_ERROR)

    @property
    def has_target(self):
        return self.arrival_target_time is not None

    @property
    def travel_minutes(self):
        return math.ceil(self.route_time_seconds / 60)

    @property
    def leave_time(self):
        if not self.has_target:
            return None
        return self.arrival_target_time - timedelta(seconds=self.route_time_seconds)


def choose_route(candidates: List[Route], known_places, destination: str, telemetry=None) -> Route:
    """
    Chooses a route from candidates, which must be sorted longest first.

    If `destination` is one of a known place's location names, the first
    candidate whose name is in that place's preferred routes wins. Otherwise
    the first candidate (the longest) is used.
    """
    telemetry = telemetry or NullTelemetry()
    chosen = None
    known_place = next((place for place in known_places if destination in place.match_names), None)

    if known_place:
        telemetry.trace("%s is a known place, looking for a preferred route", destination)
        chosen = next((route for route in candidates if route.name in known_place.preferred_route_names), None)

    if chosen is None:
        logging.debug("No preferred route found, taking the route with the highest travel time")
        chosen = candidates[0]
    else:
        telemetry.trace("preferred route is %s", chosen.name)

    return chosen


def pessimistic_travel_time(travel_time_seconds: int) -> int:
    """Adds 20% or 10 minutes, whichever is greater."""
    return travel_time_seconds + max(math.ceil(travel_time_seconds * 0.2), 600)
