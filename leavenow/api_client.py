import logging
from typing import List, Union

import requests

from .config import Config
from .route import Route, RouteError
from .telemetry import NullTelemetry


class DirectionsClient:
    """
    Client for the Google Maps Directions API.
    Each query is one paid request, so callers should only query when an event needs tracking.
    """

    def __init__(self, api_key=None, url=None, timeout=None):
        self.api_key = api_key if api_key is not None else Config.MAPS_API_KEY
        self.url = url or Config.DIRECTIONS_URL
        self.timeout = timeout if timeout is not None else Config.DIRECTIONS_TIMEOUT

    def query(self, origin, destination: str) -> dict:
        """
        Requests all alternative routes from `origin` to `destination`, departing
        now and assuming pessimistic traffic. Returns the decoded JSON payload.
        Raises requests exceptions (including Timeout) and ValueError for a non-JSON body.
        """
        params = {
            "key": self.api_key,
            "origin": f"{origin.latitude},{origin.longitude}",
            # Address tokens use '+' for spaces; requests encodes spaces back to '+'
            "destination": destination.replace('+', ' '),
            "alternatives": "true",
            "departure_time": "now",
            "traffic_model": "pessimistic",
        }
        logging.info(f"Requesting directions from {params['origin']} to '{destination}'")
        response = requests.get(self.url, params=params, timeout=self.timeout)
        logging.debug(f"Directions response status: {response.status_code}")
        return response.json()


class RouteProvider:
    """Turns a directions response into candidate routes, longest travel time first."""

    def __init__(self, client=None, telemetry=None):
        self.client = client or DirectionsClient()
        self.telemetry = telemetry or NullTelemetry()

    def get_routes(self, origin, destination: str) -> List[Union[Route, RouteError]]:
        """
        Returns candidate routes sorted by travel time, descending. On any
        failure the list holds a single RouteError instead.
        """
        with self.telemetry.section("get_routes") as t:
            try:
                result = self.client.query(origin, destination)
            except requests.exceptions.Timeout:
                logging.error(f"Timeout requesting directions to '{destination}'")
                return [RouteError("TIMEOUT", "Directions request timed out")]
            except requests.exceptions.RequestException as e:
                # The exception text carries the request URL, API key included
                logging.error(f"Directions request failed: {type(e).__name__}")
                return [RouteError("REQUEST_FAILED", type(e).__name__)]
            except ValueError as e:
                logging.error(f"Directions response was not valid JSON: {e}")
                return [RouteError("INVALID_RESPONSE", str(e))]

            routes = parse_routes(result)
            t.trace("candidate routes: %s", routes)
            return routes


def _travel_time(route_data):
    leg = route_data["legs"][0]
    # duration_in_traffic is only missing when the provider has no traffic data
    duration = leg.get("duration_in_traffic") or leg["duration"]
    return int(duration["value"])


def parse_routes(result) -> List[Union[Route, RouteError]]:
    if not isinstance(result, dict) or result.get("status") != "OK":
        status = result.get("status") if isinstance(result, dict) else None
        message = result.get("error_message") if isinstance(result, dict) else None
        logging.error(f"Directions API returned status {status}: {message}")
        return [RouteError(status, message)]

    try:
        routes = [Route(route_data.get("summary", ""), _travel_time(route_data)) for route_data in result["routes"]]
    except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
        logging.error(f"Malformed directions response: {e}")
        return [RouteError("INVALID_RESPONSE", f"Malformed directions response: {e}")]

    if not routes:
        logging.error("Directions API returned no routes")
        return [RouteError("ZERO_RESULTS", "No routes returned")]

    return sorted(routes, key=lambda route: route.travel_time_seconds, reverse=True)
