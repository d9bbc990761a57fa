#!/usr/bin/env python3
import argparse
import logging
import datetime
import sys
import os

# Add the parent directory to the path so we can import the package
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from leavenow.api_client import DirectionsClient, RouteProvider
from leavenow.calendar_source import JsonCalendarSource
from leavenow.config import Config, JsonConfigStore
from leavenow.errors import PositionUnavailable
from leavenow.event import select_next_event
from leavenow.location import (
    IPGeolocationSource, JsonPositionCache, LocationProvider, Position, StaticPositionSource
)
from leavenow.refresh import next_refresh_time
from leavenow.reminders import InMemoryNotificationStore, JsonNotificationStore, ReminderScheduler
from leavenow.summary import format_summary
from leavenow.telemetry import make_telemetry
from leavenow.travel_planner import TravelPlanner


def setup_logging(debug=False):
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def parse_origin(origin):
    """Parse "lat,lon" into a Position."""
    try:
        lat, lon = (float(part) for part in origin.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Origin must look like LAT,LON: {origin}")
    return Position(lat, lon)


def build_location_provider(origin, telemetry):
    source = StaticPositionSource(origin) if origin else IPGeolocationSource()
    return LocationProvider(source, JsonPositionCache(), telemetry=telemetry)


def now_local():
    return datetime.datetime.now(Config.timezone())


def plan(args, telemetry):
    """Run one planning cycle: travel time, reminders and next refresh."""
    planner = TravelPlanner(
        JsonCalendarSource(),
        build_location_provider(args.origin, telemetry),
        RouteProvider(DirectionsClient(), telemetry=telemetry),
        JsonConfigStore(),
        telemetry=telemetry,
    )
    now = now_local()
    try:
        info = planner.plan(args.calendar, be_pessimistic=not args.optimistic, now=now)
    except PositionUnavailable as e:
        print(f"❌ {e}")
        return 1

    store = InMemoryNotificationStore() if args.dry_run else JsonNotificationStore()
    ReminderScheduler(store, telemetry=telemetry).reconcile(info, now)

    print(format_summary(info).render())
    for reminder in store.list_pending(now):
        print(f"⏰ {reminder.title}: {reminder.body} at {reminder.trigger_time.strftime('%H:%M')}")
    print(f"🔄 Next refresh no earlier than {next_refresh_time(info, now).strftime('%H:%M')}")
    return 0


def routes(args, telemetry):
    """List the candidate routes to a destination."""
    try:
        origin = build_location_provider(args.origin, telemetry).get_current_position()
    except PositionUnavailable as e:
        print(f"❌ {e}")
        return 1

    candidates = RouteProvider(DirectionsClient(), telemetry=telemetry).get_routes(origin, args.destination)
    if candidates[0].is_error:
        print(f"❌ Directions failed: {candidates[0].provider_status} {candidates[0].provider_message or ''}")
        return 1

    for i, route in enumerate(candidates):
        print(f"  {i+1}. {route.name}: {route.travel_time_seconds / 60:.1f} minutes")
    return 0


def next_event(args, telemetry):
    """Show which event would be tracked right now."""
    now = now_local()
    events = JsonCalendarSource().events_for_today(args.calendar, now)
    selected = select_next_event(events, now, telemetry=telemetry)
    if selected.is_none:
        print("No where to go...")
    else:
        print(f"📍 {selected.title} at {selected.time.strftime('%H:%M')} ({selected.location})")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="leavenow - travel time and leave reminders for your next event",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plan the next trip, update reminders and show when to refresh
  ./main_cli.py plan --calendar "Travel Destinations"

  # Plan from a fixed origin without touching stored reminders
  ./main_cli.py plan --origin=-33.87,151.21 --dry-run

  # List candidate routes to a destination
  ./main_cli.py routes "Sydney+Airport" --origin=-33.87,151.21
        """
    )

    parser.add_argument('--debug', action='store_true', help='Enable debug logging and tracing')

    subparsers = parser.add_subparsers(dest='command', help='Sub-command help')

    plan_parser = subparsers.add_parser('plan', help='Run one planning cycle')
    plan_parser.add_argument('--calendar', type=str, default=Config.CALENDAR_NAME, help='Calendar to track')
    plan_parser.add_argument('--optimistic', action='store_true', help='Do not add the pessimism buffer')
    plan_parser.add_argument('--origin', type=parse_origin, help='Use LAT,LON instead of looking up the position')
    plan_parser.add_argument('--dry-run', action='store_true', help='Do not write reminders')

    routes_parser = subparsers.add_parser('routes', help='List candidate routes to a destination')
    routes_parser.add_argument('destination', type=str, help='Destination address token')
    routes_parser.add_argument('--origin', type=parse_origin, help='Use LAT,LON instead of looking up the position')

    event_parser = subparsers.add_parser('next-event', help='Show the event that would be tracked')
    event_parser.add_argument('--calendar', type=str, default=Config.CALENDAR_NAME, help='Calendar to track')

    args = parser.parse_args(argv)
    debug = args.debug or Config.DEBUG
    setup_logging(debug)
    telemetry = make_telemetry(debug)

    commands = {'plan': plan, 'routes': routes, 'next-event': next_event}
    if args.command not in commands:
        parser.print_help()
        return 1
    return commands[args.command](args, telemetry)


if __name__ == "__main__":
    sys.exit(main())
