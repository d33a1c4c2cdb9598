"""Local (offline) resolution of free-text queries."""

from .matcher import (
    find_local_match,
    levenshtein_distance,
    rank_matches,
    score_candidate,
)

__all__ = [
    "find_local_match",
    "levenshtein_distance",
    "rank_matches",
    "score_candidate",
]
