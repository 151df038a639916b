"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_GEOLOCATION_TIMEOUT_SECONDS = 5.0
DEFAULT_FULL_DAY_HOURS = 5.0

# Completion-percentage thresholds for the expected-vs-actual evaluator.
ON_TRACK_THRESHOLD = 75.0
BEHIND_THRESHOLD = 50.0

# A scheduled working day counts as present / half-day in range reports
# when the worked share of the expected minutes reaches these ratios.
PRESENT_RATIO = 0.75
HALF_DAY_RATIO = 0.25

DEFAULT_LEAVE_LIST_LIMIT = 200
DEFAULT_MESSAGE_LIST_LIMIT = 200
