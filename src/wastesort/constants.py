"""Calibrated constants and environment-driven settings."""

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------

MS_PER_DAY = 24 * 60 * 60 * 1000

CACHE_TTL_DAYS = 30
CACHE_TTL_MS = CACHE_TTL_DAYS * MS_PER_DAY

EVENT_RETENTION_DAYS = 30
EVENT_RETENTION_MS = EVENT_RETENTION_DAYS * MS_PER_DAY

# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

# Scores at or above this value count as "no match".
MATCH_THRESHOLD = 3.0

# Relaxed threshold used when collecting "did you mean" suggestions.
SUGGESTION_THRESHOLD = 5.0
SUGGESTION_LIMIT = 3

MIN_QUERY_LENGTH = 2
PHONETIC_MIN_LENGTH = 6
PHONETIC_CODE_LENGTH = 6

# Number of popular queries consulted when building ranking boosts.
POPULARITY_LIMIT = 50
MAX_POPULARITY_BOOST = 0.5

# ---------------------------------------------------------------------------
# Response cache
# ---------------------------------------------------------------------------

CACHE_MAX_ENTRIES = 500
FINGERPRINT_SLICE = 50

# ---------------------------------------------------------------------------
# Prefetch
# ---------------------------------------------------------------------------

PREFETCH_MAX_ITEMS = 20
PREFETCH_MIN_SEARCHES = 10
PREFETCH_MAX_HIT_RATE = 50.0

# ---------------------------------------------------------------------------
# Storage slots
# ---------------------------------------------------------------------------

AI_CACHE_KEY = "wastesort:ai_cache"
ANALYTICS_KEY = "wastesort:analytics"
USER_DATABASE_KEY = "wastesort:user_database"

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

CACHE_DIR = os.environ.get(
    "WASTESORT_CACHE_DIR",
    str(Path.home() / ".cache" / "wastesort"),
)
LOG_LEVEL = os.environ.get("WASTESORT_LOG_LEVEL", "WARNING").upper()
