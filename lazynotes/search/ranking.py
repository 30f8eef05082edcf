"""Query ranking over note titles, tags, or bodies.

Every scope produces a signed integer score where higher is better. Results
are sorted by descending score with a stable sort, so equal scores keep the
input order and results stay put while a query is being typed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from ..notes.types import Document
from .fuzzy import best_fuzzy_score, contains_casefold, fuzzy_score

SEARCH_SCOPE_TITLE = "title"
SEARCH_SCOPE_TAG = "tag"
SEARCH_SCOPE_CONTENT = "content"
SEARCH_SCOPES: tuple[str, ...] = (SEARCH_SCOPE_TITLE, SEARCH_SCOPE_TAG, SEARCH_SCOPE_CONTENT)

# Content matches sit above any plausible title-only score; the fuzzy title
# score is added on top and only orders content matches among themselves.
CONTENT_MATCH_BASELINE = 1_000

logger = logging.getLogger(__name__)

BodyLoader = Callable[[Document], str]


def _score_title(query: str, doc: Document) -> int | None:
    return fuzzy_score(query, doc.title)


def _score_tags(query: str, doc: Document) -> int | None:
    return best_fuzzy_score(query, doc.tags)


def _score_content(query: str, doc: Document, load_body: BodyLoader) -> int | None:
    try:
        body = load_body(doc)
    except OSError as exc:
        logger.debug("Content search skipped %s: %s", doc.path, exc)
        return None
    if not contains_casefold(query, body):
        return None
    return CONTENT_MATCH_BASELINE + (fuzzy_score(query, doc.title) or 0)


def rank_scored(
    documents: Sequence[Document],
    query: str,
    scope: str = SEARCH_SCOPE_TITLE,
    load_body: BodyLoader | None = None,
) -> list[tuple[Document, int]]:
    """Return matching ``(document, score)`` pairs, best first.

    An empty query matches everything with score 0 in input order. Content
    scope needs ``load_body``; it is called for every candidate, which loads
    bodies on demand through the cache.
    """
    if not query:
        return [(doc, 0) for doc in documents]
    if scope not in SEARCH_SCOPES:
        raise ValueError(f"unknown search scope: {scope!r}")
    if scope == SEARCH_SCOPE_CONTENT and load_body is None:
        raise ValueError("content search requires a body loader")

    scored: list[tuple[Document, int]] = []
    for doc in documents:
        if scope == SEARCH_SCOPE_TITLE:
            score = _score_title(query, doc)
        elif scope == SEARCH_SCOPE_TAG:
            score = _score_tags(query, doc)
        else:
            assert load_body is not None
            score = _score_content(query, doc, load_body)
        if score is None:
            continue
        scored.append((doc, score))

    scored.sort(key=lambda item: -item[1])
    return scored


def rank(
    documents: Sequence[Document],
    query: str,
    scope: str = SEARCH_SCOPE_TITLE,
    load_body: BodyLoader | None = None,
) -> list[Document]:
    """Return matching documents, best first."""
    return [doc for doc, _score in rank_scored(documents, query, scope, load_body)]
