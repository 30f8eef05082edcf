"""Fuzzy subsequence scoring for note titles and tags.

A query matches when its characters appear in order in the candidate;
contiguous runs and matches at word boundaries score higher.
"""

from __future__ import annotations

WORD_BOUNDARY_CHARS = "/_- ."


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``query`` as an in-order subsequence of ``candidate``.

    Returns ``None`` when some query character cannot be matched. Higher is
    better: consecutive runs and word-boundary hits earn bonuses, gaps and
    long candidates are penalized.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    run = 0
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate_folded[idx - 1] in WORD_BOUNDARY_CHARS:
            score += 35
        prev_idx = idx

    score -= len(candidate_folded) // 5
    return score


def best_fuzzy_score(query: str, candidates: tuple[str, ...] | list[str]) -> int | None:
    """Return the highest score over ``candidates`` or ``None`` if none match."""
    best: int | None = None
    for candidate in candidates:
        score = fuzzy_score(query, candidate)
        if score is None:
            continue
        if best is None or score > best:
            best = score
    return best


def contains_casefold(query: str, text: str) -> bool:
    return query.casefold() in text.casefold()
