"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60
SATURDAY = 6

# Roughly two years of calendar days.
MAX_SWEEP_ITERATIONS = 730
MAX_SLA_ITERATIONS = 365

DEFAULT_SLA_HOURS = 8
DEFAULT_ACK_WINDOW_MINUTES = 30
LEAVE_LOOKAHEAD_DAYS = 60
URGENT_THRESHOLD_MINUTES = 120
