import os
import json
import logging
from typing import List

import pytz
from dotenv import load_dotenv

from .errors import ConfigUnavailable

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """
    Configuration class for leavenow.
    This class loads configuration values from environment variables or uses default values.
    """
    # General configuration
    DEBUG = os.environ.get('DEBUG', 'False') == 'True'

    # Timezone configuration
    TIMEZONE = os.environ.get('TIMEZONE', 'Australia/Sydney')

    # Directions provider
    MAPS_API_KEY = os.environ.get('MAPS_API_KEY', '')
    DIRECTIONS_URL = os.environ.get('DIRECTIONS_URL', 'https://maps.googleapis.com/maps/api/directions/json')
    DIRECTIONS_TIMEOUT = float(os.environ.get('DIRECTIONS_TIMEOUT', 10))
    GEOLOCATION_URL = os.environ.get('GEOLOCATION_URL', 'http://ip-api.com/json')

    # Calendar and local data files
    CALENDAR_NAME = os.environ.get('CALENDAR_NAME', 'Travel Destinations')
    DATA_DIR = os.environ.get('LEAVENOW_DATA_DIR', os.path.join(os.path.expanduser('~'), '.leavenow'))
    CALENDAR_FILE = os.environ.get('CALENDAR_FILE', os.path.join(DATA_DIR, 'calendar.json'))
    KNOWN_PLACES_FILE = os.environ.get('KNOWN_PLACES_FILE', os.path.join(DATA_DIR, 'known_places.json'))
    LOCATION_CACHE_FILE = os.environ.get('LOCATION_CACHE_FILE', os.path.join(DATA_DIR, 'last_location.json'))
    NOTIFICATIONS_FILE = os.environ.get('NOTIFICATIONS_FILE', os.path.join(DATA_DIR, 'notifications.json'))

    @classmethod
    def timezone(cls):
        return pytz.timezone(cls.TIMEZONE)


class KnownPlace:
    """A configured destination with an ordered preferred route override."""

    def __init__(self, match_names, preferred_route_names):
        self.match_names = frozenset(match_names)
        self.preferred_route_names = list(preferred_route_names)

    @classmethod
    def from_dict(cls, place_dict):
        return cls(place_dict['location_names'], place_dict['preferred_routes'])

    def __repr__(self):
        return f"KnownPlace({sorted(self.match_names)}, {self.preferred_route_names})"


class JsonConfigStore:
    """
    Reads the known places document:

        {"known_places": [{"location_names": [...], "preferred_routes": [...]}]}

    Raises ConfigUnavailable if the file is missing or not shaped like the above.
    """

    def __init__(self, path=None):
        self.path = path or Config.KNOWN_PLACES_FILE

    def load_known_places(self) -> List[KnownPlace]:
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigUnavailable(f"Known places file not found: {self.path}")
        except (OSError, ValueError) as e:
            raise ConfigUnavailable(f"Could not read known places from {self.path}: {e}")

        try:
            places = [KnownPlace.from_dict(place) for place in data['known_places']]
        except (KeyError, TypeError) as e:
            raise ConfigUnavailable(f"Malformed known places in {self.path}: {e}")

        logging.debug(f"Loaded {len(places)} known places from {self.path}")
        return places
