"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

GEOLOCATION_TIMEOUT_SECONDS = 15.0
COORDINATE_PRECISION = 6

DEADLINE_APPROACHING_DAYS = 3

DEFAULT_PAGE_LIMIT = 30
DEFAULT_TASK_PAGE_LIMIT = 10
DEFAULT_MAX_VISIBLE_PAGES = 5

# Filter value the console uses for "no filter".
FILTER_ALL = "All"

REQUEST_TIMEOUT_SECONDS = 10.0
