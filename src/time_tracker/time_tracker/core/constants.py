"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PROJECT_NAME = "No Project"
DEFAULT_REJECTION_REASON = "No reason provided"
DEFAULT_TASK_COLOR = "#000000"

DEFAULT_SESSION_HOURS = 12
MIN_PASSWORD_LENGTH = 6
MIN_SUPERADMIN_PASSWORD_LENGTH = 12

# Average-per-week never divides by fewer weeks than this.
MIN_WEEKS_FOR_AVERAGE = 4

# Column widths in database/schema.sql.
MAX_NAME_LENGTH = 120
MAX_EMAIL_LENGTH = 255
MAX_PROJECT_NAME_LENGTH = 255
MAX_REJECTION_REASON_LENGTH = 500
MAX_MINUTES = 2**31 - 1
