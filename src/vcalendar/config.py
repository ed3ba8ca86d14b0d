"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# TIMEZONES
# =============================================================================

DEFAULT_TIMEZONE = os.environ.get("VCALENDAR_DEFAULT_TIMEZONE", "America/New_York")

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("VCALENDAR_LOG_LEVEL", "INFO").upper()

# =============================================================================
# RECURRENCE
# =============================================================================

# Hard cap on how many occurrences a single series may expand into
MAX_RECURRENCE_OCCURRENCES = int(os.environ.get("VCALENDAR_MAX_OCCURRENCES", "2500"))

# =============================================================================
# EXPORT
# =============================================================================

EXPORT_DIR = Path(os.environ.get("VCALENDAR_EXPORT_DIR", Path.cwd() / "output"))
CSV_HEADER = [
    "Subject",
    "Start Date",
    "Start Time",
    "End Date",
    "End Time",
    "All Day",
    "Description",
    "Location",
    "Public",
]
