"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_TTL_MINUTES = 10
DEFAULT_LATE_THRESHOLD_MINUTES = 10
DEFAULT_INACTIVE_THRESHOLD_MINUTES = 10

TOKEN_SCHEMA_VERSION = 1

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
