"""Tests for group-level tf-idf scoring and ranking."""

from __future__ import annotations

from pathlib import Path
import math
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from distinctive.corpus.records import CountRecord
from distinctive.metrics.tfidf import rank_terms, score_tf_idf, top_terms_per_group


def _four_group_counts() -> list[CountRecord]:
    """Group A: 'x' 80 of 500 tokens; 'the' appears in every group."""
    return [
        CountRecord("A", "x", "NOUN", 80),
        CountRecord("A", "the", "DET", 420),
        CountRecord("B", "the", "DET", 300),
        CountRecord("B", "y", "NOUN", 100),
        CountRecord("C", "the", "DET", 50),
        CountRecord("C", "y", "NOUN", 50),
        CountRecord("D", "the", "DET", 10),
    ]


def _by_key(records):
    return {(r.group, r.lemma, r.part_of_speech): r for r in records}


# ---------------------------------------------------------------------------
# Scoring


def test_single_group_lemma_scenario() -> None:
    record = _by_key(score_tf_idf(_four_group_counts()))[("A", "x", "NOUN")]
    assert record.tf == pytest.approx(0.16)
    assert record.idf == pytest.approx(math.log(4.0))
    assert record.tf_idf == pytest.approx(0.2218, abs=1e-4)


def test_lemma_in_every_group_has_zero_idf() -> None:
    for record in score_tf_idf(_four_group_counts()):
        if record.lemma == "the":
            assert record.idf == 0.0
            assert record.tf_idf == 0.0
            assert record.tf > 0.0


def test_idf_zero_iff_term_in_every_group() -> None:
    records = score_tf_idf(_four_group_counts())
    groups = {r.group for r in records}
    for record in records:
        containing = {r.group for r in records if r.term == record.term}
        assert (record.idf == 0.0) == (containing == groups)
        assert record.tf_idf == pytest.approx(record.tf * record.idf)


def test_two_of_four_groups_idf() -> None:
    record = _by_key(score_tf_idf(_four_group_counts()))[("B", "y", "NOUN")]
    assert record.tf == pytest.approx(0.25)
    assert record.idf == pytest.approx(math.log(2.0))


def test_parts_of_speech_are_separate_terms() -> None:
    counts = [
        CountRecord("A", "light", "NOUN", 5),
        CountRecord("B", "light", "ADJ", 5),
        CountRecord("B", "light", "NOUN", 5),
    ]
    records = _by_key(score_tf_idf(counts))
    assert records[("A", "light", "NOUN")].idf == 0.0
    assert records[("B", "light", "ADJ")].idf == pytest.approx(math.log(2.0))
    assert records[("B", "light", "NOUN")].tf == pytest.approx(0.5)


def test_output_sorted_with_lemma_tie_break() -> None:
    counts = [
        CountRecord("A", "zeal", "NOUN", 1),
        CountRecord("A", "awe", "NOUN", 1),
        CountRecord("B", "bread", "NOUN", 2),
    ]
    records = score_tf_idf(counts)
    assert [(r.group, r.lemma) for r in records] == [("B", "bread"), ("A", "awe"), ("A", "zeal")]
    scores = [r.tf_idf for r in records]
    assert scores == sorted(scores, reverse=True)


def test_scoring_is_idempotent() -> None:
    counts = _four_group_counts()
    assert score_tf_idf(counts) == score_tf_idf(list(reversed(counts)))


def test_score_rejects_duplicates_and_bad_counts() -> None:
    with pytest.raises(ValueError):
        score_tf_idf([CountRecord("A", "x", "NOUN", 1), CountRecord("A", "x", "NOUN", 2)])
    with pytest.raises(ValueError):
        score_tf_idf([CountRecord("A", "x", "NOUN", 0)])


def test_score_empty() -> None:
    assert score_tf_idf([]) == []


# ---------------------------------------------------------------------------
# Ranking


def test_rank_terms_filters_and_dense_ranks() -> None:
    counts = [
        CountRecord("A", "gold", "NOUN", 3),
        CountRecord("A", "silver", "NOUN", 3),
        CountRecord("A", "bronze", "NOUN", 1),
        CountRecord("A", "shine", "VERB", 9),
        CountRecord("B", "iron", "NOUN", 4),
    ]
    ranked = rank_terms(score_tf_idf(counts), "NOUN", "A")
    assert [(item.record.lemma, item.rank) for item in ranked] == [("gold", 1), ("silver", 1), ("bronze", 2)]


def test_rank_terms_unknown_group_is_empty() -> None:
    assert rank_terms(score_tf_idf(_four_group_counts()), "NOUN", "Z") == []


def test_top_terms_per_group_keeps_ties() -> None:
    counts = [
        CountRecord("A", "gold", "NOUN", 3),
        CountRecord("A", "silver", "NOUN", 3),
        CountRecord("A", "bronze", "NOUN", 1),
        CountRecord("B", "iron", "NOUN", 4),
    ]
    top = top_terms_per_group(score_tf_idf(counts), 1)
    assert list(top) == ["A", "B"]
    assert [r.lemma for r in top["A"]] == ["gold", "silver"]
    assert [r.lemma for r in top["B"]] == ["iron"]


def test_top_terms_per_group_pos_filter_and_validation() -> None:
    top = top_terms_per_group(score_tf_idf(_four_group_counts()), 5, part_of_speech="DET")
    assert all(r.part_of_speech == "DET" for records in top.values() for r in records)
    with pytest.raises(ValueError):
        top_terms_per_group([], 0)
