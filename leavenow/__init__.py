"""
leavenow

Works out how long it will take to get to the next event in a calendar,
picks a route, and derives "get ready" and "leave now" reminders plus the
earliest time it is worth asking the directions API again.

Example:
    from leavenow.travel_planner import TravelPlanner
    from leavenow.refresh import next_refresh_time
    from leavenow.reminders import reconcile_reminders

    planner = TravelPlanner(calendar_source, location_provider, route_provider, config_store)
    info = planner.plan("Travel Destinations", be_pessimistic=True)
    reconcile_reminders(info, now, store)
    refresh_at = next_refresh_time(info, now)
"""

from .travel_planner import TravelPlanner
from .route import Route, RouteError, RouteInfo, choose_route
from .event import Event, select_next_event
from .reminders import ReminderScheduler, reconcile_reminders
from .refresh import next_refresh_time

__all__ = [
    'TravelPlanner', 'Route', 'RouteError', 'RouteInfo', 'choose_route',
    'Event', 'select_next_event', 'ReminderScheduler', 'reconcile_reminders',
    'next_refresh_time',
]
