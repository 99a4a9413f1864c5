"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

PRESENT_STATUS = "Present"
WEATHER_NOT_AVAILABLE = "N/A"
DAY_FORMAT = "%Y-%m-%d"
LOCATION_ID_PREFIX = "LOC"

# Table / sheet names
LEDGER_TABLE = "attendance"
ROSTER_TABLE = "students"
LOCATIONS_TABLE = "work_locations"
