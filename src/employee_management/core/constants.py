"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TOKEN_TTL_HOURS = 24
MIN_PASSWORD_LENGTH = 6
DEFAULT_WORKING_DAYS = 22
DEFAULT_COUNTRY = "India"
DEFAULT_JOB_LOCATION = "Mumbai, India"
EMPLOYEE_CODE_PREFIX = "EMP"
RATING_MIN = 1
RATING_MAX = 5
DEFAULT_LIST_LIMIT = 500
