import re
import logging
from datetime import datetime, time, timedelta
from typing import Dict, Any, List

from .telemetry import NullTelemetry

ELIGIBILITY_WINDOW = timedelta(minutes=120)
NO_EVENT_TITLE = "none"


class Event:
    def __init__(self, event_dict: Dict[str, Any]) -> None:
        # Initialize the event with data from a calendar event dictionary
        self.title = event_dict.get('summary', event_dict.get('title', ''))
        self.location = event_dict.get('location')

        start = event_dict.get('start', {})
        if isinstance(start, dict):
            self.start_str = start.get('dateTime')
        else:
            self.start_str = start

        self.start_time = self._parse_datetime(self.start_str)

    def _parse_datetime(self, datetime_str):
        """Parse an ISO format datetime string."""
        if not datetime_str:
            return None
        if isinstance(datetime_str, datetime):
            return datetime_str
        try:
            return datetime.fromisoformat(datetime_str.replace('Z', '+00:00'))
        except (ValueError, AttributeError):
            return None

    def __str__(self):
        return f"Event({self.title}, {self.start_time}, {self.location})"

    def __repr__(self):
        return self.__str__()


class SelectedEvent:
    """
    The event chosen for tracking. When nothing qualifies this is the "none"
    sentinel, whose time is the end of the current day.
    """

    def __init__(self, title, location, time):
        self.title = title
        self.location = location
        self.time = time

    @classmethod
    def none(cls, end_of_today):
        return cls(NO_EVENT_TITLE, None, end_of_today)

    @property
    def is_none(self):
        return self.title == NO_EVENT_TITLE and self.location is None

    def __repr__(self):
        return f"SelectedEvent({self.title}, {self.time}, {self.location})"


def end_of_day(now: datetime) -> datetime:
    """Midnight at the start of the day after `now`, in `now`'s timezone."""
    midnight = datetime.combine(now.date() + timedelta(days=1), time.min)
    tz = now.tzinfo
    if tz is None:
        return midnight
    if hasattr(tz, 'localize'):
        # pytz zones need localize() to pick the right offset across DST changes
        return tz.localize(midnight)
    return midnight.replace(tzinfo=tz)


def normalize_location(location: str) -> str:
    """
    Turns a free-text calendar location into a directions address token:
    spaces and newlines become '+', commas are dropped and en-dashes become hyphens.
    """
    token = re.sub(r'[ \n]', '+', location)
    token = token.replace(',', '')
    return token.replace('–', '-')


def select_next_event(events: List[Event], now: datetime, telemetry=None) -> SelectedEvent:
    """
    Picks the earliest event that starts after `now`, within the next two
    hours, before the end of today, and has a location.
    """
    telemetry = telemetry or NullTelemetry()
    selected = SelectedEvent.none(end_of_day(now))
    telemetry.trace("end of day is %s", selected.time.isoformat())

    for event in events:
        if (event.start_time > now
                and event.start_time < selected.time
                and event.start_time - now <= ELIGIBILITY_WINDOW
                and event.location):
            selected = SelectedEvent(event.title, normalize_location(event.location), event.start_time)

    if selected.is_none:
        logging.info("No eligible event in the next %d minutes", ELIGIBILITY_WINDOW.seconds // 60)
    else:
        logging.info(f"Next event: '{selected.title}' at {selected.time.isoformat()} ({selected.location})")
    return selected
