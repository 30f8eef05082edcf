"""Search ranking tests across title, tag, and content scopes."""

from __future__ import annotations

import unittest
from pathlib import Path

from lazynotes.notes.types import Document
from lazynotes.search.fuzzy import best_fuzzy_score, fuzzy_score
from lazynotes.search.ranking import (
    CONTENT_MATCH_BASELINE,
    SEARCH_SCOPE_CONTENT,
    SEARCH_SCOPE_TAG,
    SEARCH_SCOPE_TITLE,
    rank,
    rank_scored,
)


def _doc(title: str, tags: tuple[str, ...] = ()) -> Document:
    return Document(path=Path(f"/notes/{title}.md"), title=title, size=0, mtime_ns=0, tags=tags)


def _titles(documents: list[Document]) -> list[str]:
    return [doc.title for doc in documents]


class FuzzyScoreTests(unittest.TestCase):
    def test_non_subsequence_is_rejected(self) -> None:
        self.assertIsNone(fuzzy_score("xyz", "alpha"))
        self.assertIsNone(fuzzy_score("ba", "ab"))

    def test_empty_query_scores_zero(self) -> None:
        self.assertEqual(fuzzy_score("", "anything"), 0)

    def test_matching_is_case_insensitive(self) -> None:
        self.assertEqual(fuzzy_score("AP", "apple"), fuzzy_score("ap", "APPLE"))

    def test_contiguous_prefix_beats_scattered_match(self) -> None:
        self.assertGreater(fuzzy_score("ap", "apple"), fuzzy_score("ap", "alpha"))

    def test_word_boundary_bonus(self) -> None:
        self.assertGreater(fuzzy_score("p", "work/plan"), fuzzy_score("p", "workplan"))

    def test_best_fuzzy_score_picks_highest(self) -> None:
        self.assertEqual(best_fuzzy_score("wo", ["work", "hobby"]), fuzzy_score("wo", "work"))
        self.assertIsNone(best_fuzzy_score("zz", ["work", "hobby"]))
        self.assertIsNone(best_fuzzy_score("a", []))


class RankTests(unittest.TestCase):
    def setUp(self) -> None:
        self.documents = [_doc("alpha"), _doc("beta"), _doc("gamma"), _doc("apple")]

    def test_title_scope_filters_to_matches(self) -> None:
        self.assertEqual(set(_titles(rank(self.documents, "ap", SEARCH_SCOPE_TITLE))), {"alpha", "apple"})
        self.assertEqual(_titles(rank(self.documents, "bet", SEARCH_SCOPE_TITLE)), ["beta"])

    def test_empty_query_returns_input_order(self) -> None:
        self.assertEqual(_titles(rank(self.documents, "", SEARCH_SCOPE_TITLE)), ["alpha", "beta", "gamma", "apple"])

    def test_equal_scores_keep_input_order(self) -> None:
        twins = [
            Document(path=Path(f"/notes/{idx}/note.md"), title="note", size=0, mtime_ns=0) for idx in range(3)
        ]
        ranked = rank(twins, "no", SEARCH_SCOPE_TITLE)
        self.assertEqual([doc.path for doc in ranked], [doc.path for doc in twins])

    def test_results_sorted_by_descending_score(self) -> None:
        scored = rank_scored(self.documents, "a", SEARCH_SCOPE_TITLE)
        scores = [score for _doc, score in scored]
        self.assertEqual(scores, sorted(scores, reverse=True))

    def test_tag_scope_uses_best_tag(self) -> None:
        docs = [_doc("one", ("home",)), _doc("two", ("work", "urgent")), _doc("three")]
        self.assertEqual(_titles(rank(docs, "wor", SEARCH_SCOPE_TAG)), ["two"])

    def test_content_scope_matches_substring_case_insensitively(self) -> None:
        bodies = {"alpha": "Meeting NOTES", "beta": "nothing here", "gamma": "notes again", "apple": ""}

        ranked = rank_scored(
            self.documents,
            "notes",
            SEARCH_SCOPE_CONTENT,
            load_body=lambda doc: bodies[doc.title],
        )

        self.assertEqual({doc.title for doc, _score in ranked}, {"alpha", "gamma"})
        self.assertTrue(all(score >= CONTENT_MATCH_BASELINE for _doc, score in ranked))

    def test_content_score_adds_title_score_to_baseline(self) -> None:
        ranked = rank_scored(
            [_doc("zzz"), _doc("lemon")],
            "lem",
            SEARCH_SCOPE_CONTENT,
            load_body=lambda doc: "lemon tart",
        )
        scores = {doc.title: score for doc, score in ranked}
        self.assertEqual(scores["zzz"], CONTENT_MATCH_BASELINE)
        self.assertEqual(scores["lemon"], CONTENT_MATCH_BASELINE + fuzzy_score("lem", "lemon"))
        self.assertEqual([doc.title for doc, _score in ranked], ["lemon", "zzz"])

    def test_content_scope_skips_unreadable_bodies(self) -> None:
        def load(doc: Document) -> str:
            if doc.title == "beta":
                raise OSError("gone")
            return "shared text"

        ranked = rank(self.documents, "shared", SEARCH_SCOPE_CONTENT, load_body=load)
        self.assertNotIn("beta", _titles(ranked))
        self.assertEqual(len(ranked), 3)

    def test_content_scope_requires_loader(self) -> None:
        with self.assertRaises(ValueError):
            rank(self.documents, "x", SEARCH_SCOPE_CONTENT)

    def test_unknown_scope_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            rank(self.documents, "x", "everything")


if __name__ == "__main__":
    unittest.main()
