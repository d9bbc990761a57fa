import json
import logging
from typing import List

from .config import Config
from .event import Event


class JsonCalendarSource:
    """
    Calendar events stored as JSON, keyed by calendar name:

        {"Travel Destinations": [{"summary": ..., "location": ..., "start": {"dateTime": ...}}]}
    """

    def __init__(self, path=None, tz=None):
        self.path = path or Config.CALENDAR_FILE
        self.tz = tz or Config.timezone()

    def _load(self):
        with open(self.path, 'r') as f:
            return json.load(f)

    def _localize(self, event):
        if event.start_time is not None and event.start_time.tzinfo is None:
            event.start_time = self.tz.localize(event.start_time)
        return event

    def events_for_today(self, calendar_name, now) -> List[Event]:
        """Returns the events in `calendar_name` starting on the same date as `now`."""
        data = self._load()
        if calendar_name not in data:
            logging.warning(f"Calendar '{calendar_name}' not found in {self.path}")
            return []

        events = [self._localize(Event(event_data)) for event_data in data[calendar_name]]
        today = now.astimezone(self.tz).date()
        todays_events = [
            event for event in events
            if event.start_time is not None and event.start_time.astimezone(self.tz).date() == today
        ]
        logging.debug(f"Found {len(todays_events)} events today in '{calendar_name}'")
        return todays_events
