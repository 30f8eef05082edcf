"""Search package exports.

Combines the fuzzy scorer and scope ranking in one import surface.
"""

from __future__ import annotations

from .fuzzy import best_fuzzy_score, contains_casefold, fuzzy_score
from .ranking import (
    CONTENT_MATCH_BASELINE,
    SEARCH_SCOPE_CONTENT,
    SEARCH_SCOPE_TAG,
    SEARCH_SCOPE_TITLE,
    SEARCH_SCOPES,
    rank,
    rank_scored,
)

__all__ = [
    "CONTENT_MATCH_BASELINE",
    "SEARCH_SCOPES",
    "SEARCH_SCOPE_CONTENT",
    "SEARCH_SCOPE_TAG",
    "SEARCH_SCOPE_TITLE",
    "best_fuzzy_score",
    "contains_casefold",
    "fuzzy_score",
    "rank",
    "rank_scored",
]
