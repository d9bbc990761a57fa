import logging
import datetime
from concurrent.futures import ThreadPoolExecutor

from .errors import ConfigUnavailable
from .event import select_next_event
from .route import RouteInfo, choose_route, pessimistic_travel_time
from .telemetry import NullTelemetry


class TravelPlanner:
    def __init__(self, calendar_source, location_provider, route_provider, config_store, telemetry=None):
        """
        Initialize the TravelPlanner with its collaborators.

        Args:
            calendar_source: provides events_for_today(calendar_name, now)
            location_provider: provides get_current_position()
            route_provider: provides get_routes(origin, destination)
            config_store: provides load_known_places()
        """
        self.calendar_source = calendar_source
        self.location_provider = location_provider
        self.route_provider = route_provider
        self.config_store = config_store
        self.telemetry = telemetry or NullTelemetry()

    def load_known_places(self):
        try:
            return self.config_store.load_known_places()
        except ConfigUnavailable as e:
            logging.warning(f"{e}; continuing without known places")
            return []

    def plan(self, calendar_name, be_pessimistic=False, now=None) -> RouteInfo:
        """
        Works out the travel time to the next event in `calendar_name`.

        Known places are loaded in the background while the event is selected;
        they are only needed once routes have come back. If there is no event
        to track, no position lookup or directions request is made.

        Raises PositionUnavailable if there is no position to route from.
        """
        now = now or datetime.datetime.now(datetime.timezone.utc)

        with self.telemetry.section("plan") as t, ThreadPoolExecutor(max_workers=1) as executor:
            known_places_future = executor.submit(self.load_known_places)

            events = self.calendar_source.events_for_today(calendar_name, now)
            selected = select_next_event(events, now, telemetry=t)
            if selected.is_none:
                t.trace("nowhere to go for the rest of the day")
                return RouteInfo.nothing_to_track()

            position = self.location_provider.get_current_position()
            candidates = self.route_provider.get_routes(position, selected.location)
            if candidates[0].is_error:
                error = candidates[0]
                logging.error(f"Directions provider returned status {error.provider_status} - \"{error.provider_message}\"")
                return RouteInfo.provider_error()

            known_places = known_places_future.result()
            chosen = choose_route(candidates, known_places, selected.location, telemetry=t)
            logging.info(f"Travel time to {selected.title} is {chosen.travel_time_seconds / 60:.1f} minutes using {chosen.name}")

            final_travel_time = chosen.travel_time_seconds
            if be_pessimistic:
                final_travel_time = pessimistic_travel_time(final_travel_time)

            route_info = RouteInfo(
                route_name=chosen.name,
                route_time_seconds=final_travel_time,
                destination_name=selected.title,
                arrival_target_time=selected.time,
                arrival_estimate=now + datetime.timedelta(seconds=final_travel_time),
            )
            t.trace("route info: %s", route_info)
            return route_info
