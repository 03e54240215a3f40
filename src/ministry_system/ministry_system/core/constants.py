"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import datetime

ATTENDANCE_CATEGORY = "Attendance"
ATTENDANCE_POINTS = 5
ATTENDANCE_NOTE = "Automated points awarded for Sunday check-in"

MANUAL_CATEGORY_MARKER = "Manual"
MANUAL_ADJUSTMENT_CATEGORY = "Manual Adjustment"

FREEZE_ABSENCE_THRESHOLD = 4
FOLLOWUP_HIGH_ALERT = 3

SYSTEM_AUTO_ACTOR = "SYSTEM_AUTO"
SYSTEM_ACTOR = "SYSTEM"
SEASON_RESET_REASON = "SEASON RESET: POINTS ARCHIVED"

# Sorts students without any qualifying entry last among equals.
EPOCH = datetime(1970, 1, 1)

DEFAULT_MATCH_THRESHOLD = 0.78
DEFAULT_AUTO_CHECKOUT_TIME = "13:00"
DEFAULT_ALLOW_DUPLICATE_POINTS = False
MIN_MATCH_THRESHOLD = 0.5
MAX_MATCH_THRESHOLD = 0.99

WEAK_LINK_RATIO = 0.5
EMBEDDING_DIMENSIONS = 128

DEFAULT_HISTORY_LIMIT = 5
ACCESS_KEY_PREFIX = "KK"
ACCESS_KEY_ATTEMPTS = 20

DEFAULT_POINT_RULES = (
    ("Attendance", 5),
    ("Worksheet / Activities", 5),
    ("Memory Verse", 10),
    ("Recitation", 10),
    ("Presentation", 20),
)

SUNDAY_ACTIVITY_FALLBACKS = {
    1: "Bible Stories",
    2: "Memory Verse",
    3: "Games & Quiz",
    4: "Arts / Made by Tiny Hands",
    5: "Scripture Quest Day",
}
DEFAULT_ACTIVITY_TITLE = "Sunday Service"
