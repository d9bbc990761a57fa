import json
import logging
import os
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import List

from .config import Config
from .errors import NotificationWriteError
from .telemetry import NullTelemetry

LEAVE_NOW_TITLE = "Leave Now"
GET_READY_TITLE = "Get Ready To Leave"
DEFAULT_SOUND = "default"

# Reminders due sooner than this are not worth scheduling
MIN_LEAD_TIME = timedelta(seconds=30)
GET_READY_LEAD = timedelta(minutes=10)


@dataclass
class PendingReminder:
    title: str
    body: str
    trigger_time: datetime
    sound: str = DEFAULT_SOUND


class InMemoryNotificationStore:
    def __init__(self, reminders=None):
        self.reminders = {reminder.title: reminder for reminder in reminders or []}

    def list_pending(self, now=None) -> List[PendingReminder]:
        """Reminders still to fire. Given `now`, those already due are dropped."""
        if now is not None:
            self.reminders = {
                title: reminder for title, reminder in self.reminders.items()
                if reminder.trigger_time >= now
            }
        return list(self.reminders.values())

    def upsert(self, title, body, trigger_time, sound=DEFAULT_SOUND):
        self.reminders[title] = PendingReminder(title, body, trigger_time, sound)


class JsonNotificationStore(InMemoryNotificationStore):
    """Pending reminders kept in a JSON file, one entry per title."""

    def __init__(self, path=None):
        self.path = path or Config.NOTIFICATIONS_FILE
        super().__init__(self._read())

    def _read(self):
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logging.warning(f"Could not read pending reminders from {self.path}: {e}")
            return []
        try:
            reminders = []
            for item in data:
                item["trigger_time"] = datetime.fromisoformat(item["trigger_time"])
                reminders.append(PendingReminder(**item))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logging.warning(f"Ignoring malformed pending reminders in {self.path}: {e}")
            return []
        return reminders

    def upsert(self, title, body, trigger_time, sound=DEFAULT_SOUND):
        reminders = dict(self.reminders)
        reminders[title] = PendingReminder(title, body, trigger_time, sound)
        data = []
        for reminder in reminders.values():
            item = asdict(reminder)
            item["trigger_time"] = reminder.trigger_time.isoformat()
            data.append(item)
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, 'w') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise NotificationWriteError(f"Could not write reminder '{title}' to {self.path}: {e}")
        self.reminders = reminders


class ReminderScheduler:
    """
    Keeps the "Leave Now" and "Get Ready To Leave" reminders in step with the
    latest route info. Each title is read, then written at most once per cycle.
    """

    def __init__(self, store, telemetry=None):
        self.store = store
        self.telemetry = telemetry or NullTelemetry()

    def upsert(self, title, body, trigger_time, now):
        """
        Creates or updates the reminder called `title`. Returns False without
        touching the store if the trigger is not more than 30 seconds away.
        """
        if trigger_time <= now + MIN_LEAD_TIME:
            logging.info(f"Not scheduling '{title}': trigger time {trigger_time.isoformat()} has effectively passed")
            return False

        existing = next((reminder for reminder in self.store.list_pending(now) if reminder.title == title), None)
        if existing:
            self.telemetry.trace("updating '%s' from %s to %s", title, existing.trigger_time, trigger_time)
            sound = existing.sound
        else:
            self.telemetry.trace("creating '%s' at %s", title, trigger_time)
            sound = DEFAULT_SOUND

        try:
            self.store.upsert(title, body, trigger_time, sound=sound)
        except NotificationWriteError as e:
            logging.error(f"Failed to schedule '{title}': {e}")
            return False
        logging.info(f"Scheduled '{title}' for {trigger_time.isoformat()}")
        return True

    def reconcile(self, info, now):
        if not info.has_target:
            return

        with self.telemetry.section("reconcile_reminders"):
            leave_time = info.leave_time
            self.upsert(LEAVE_NOW_TITLE, "Leave NOW to " + info.destination_name, leave_time, now)

            if leave_time > now - GET_READY_LEAD:
                self.upsert(GET_READY_TITLE, "Get ready to leave to " + info.destination_name,
                            leave_time - GET_READY_LEAD, now)


def reconcile_reminders(info, now, store, telemetry=None):
    ReminderScheduler(store, telemetry=telemetry).reconcile(info, now)
