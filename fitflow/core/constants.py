# fitflow/core/constants.py
"""Platform-wide constants."""

BRAND_NAME = "FitFlow"

ROOT_MESSAGE = "FitFlow server is up and running."

# Largest page a listing endpoint will return
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20

MIN_RATING = 1
MAX_RATING = 5

MAX_REVIEW_COMMENT_LENGTH = 1000
MAX_COMMENT_LENGTH = 2000

# Number of transactions shown on the admin overview
RECENT_TRANSACTIONS_LIMIT = 6

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
