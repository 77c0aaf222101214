"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

# Fallback school zone for users who never register one.
DEFAULT_ZONE_NAME = "My School"
DEFAULT_ZONE_ADDRESS = "School Address"
DEFAULT_ZONE_LATITUDE = -1.191397
DEFAULT_ZONE_LONGITUDE = 36.655940
DEFAULT_ZONE_RADIUS_METERS = 500.0
MAX_ZONE_RADIUS_METERS = 5_000.0

DEFAULT_CHECK_INTERVAL_SECONDS = 60
# A location fix older than this no longer places the user anywhere
DEFAULT_LOCATION_MAX_AGE_SECONDS = 300
DEFAULT_UPCOMING_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30

MAX_REMINDERS_PER_CATEGORY = 3
DEFAULT_CLASS_REMINDER_MINUTES = (15,)
DEFAULT_ASSIGNMENT_REMINDER_MINUTES = (60,)

MIGRATION_VERSION = "1.0"

SETTING_SCHOOL_ZONES = "school_zones"
SETTING_REMINDER_PREFERENCES = "reminder_preferences"
