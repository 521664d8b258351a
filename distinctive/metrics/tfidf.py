"""Group-level tf-idf over (lemma, part_of_speech) terms."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..corpus.records import CountRecord

Term = Tuple[str, str]


@dataclass(frozen=True)
class TfIdfRecord:
    """CountRecord extended with term frequency, inverse document frequency and their product."""

    group: str
    lemma: str
    part_of_speech: str
    count: int
    tf: float
    idf: float
    tf_idf: float

    @property
    def term(self) -> Term:
        return (self.lemma, self.part_of_speech)


@dataclass(frozen=True)
class RankedTerm:
    """TfIdfRecord paired with its dense rank inside a filtered table."""

    record: TfIdfRecord
    rank: int


def score_tf_idf(counts: Iterable[CountRecord]) -> List[TfIdfRecord]:
    """Compute tf, idf and tf-idf for every count record.

    Groups play the role of documents: ``tf`` is relative to the group's total
    token count and ``idf = ln(n_groups / n_groups_containing_term)``, where a
    term is a (lemma, part_of_speech) pair. Terms present in every group get
    an idf of zero.

    Returns:
        Records sorted by tf-idf descending, ties broken by lemma, group and
        part of speech.
    """
    records = list(counts)
    if not records:
        return []

    totals: Dict[str, int] = defaultdict(int)
    groups_with_term: Dict[Term, Set[str]] = defaultdict(set)
    seen: Set[Tuple[str, str, str]] = set()
    for record in records:
        key = (record.group, record.lemma, record.part_of_speech)
        if key in seen:
            raise ValueError(f"Duplicate count record for {key}.")
        if record.count < 1:
            raise ValueError(f"Counts must be positive, got {record.count} for {key}.")
        seen.add(key)
        totals[record.group] += record.count
        groups_with_term[(record.lemma, record.part_of_speech)].add(record.group)

    n_groups = len(totals)
    idf = {term: math.log(n_groups / len(groups)) for term, groups in groups_with_term.items()}

    scored: List[TfIdfRecord] = []
    for record in records:
        tf = record.count / totals[record.group]
        term_idf = idf[(record.lemma, record.part_of_speech)]
        scored.append(
            TfIdfRecord(
                group=record.group,
                lemma=record.lemma,
                part_of_speech=record.part_of_speech,
                count=record.count,
                tf=tf,
                idf=term_idf,
                tf_idf=tf * term_idf,
            )
        )
    scored.sort(key=_ordering)
    return scored


def rank_terms(records: Iterable[TfIdfRecord], part_of_speech: str, group: str) -> List[RankedTerm]:
    """Filter to one group and part of speech and assign dense ranks (1 = highest tf-idf)."""
    selected = sorted(
        (record for record in records if record.part_of_speech == part_of_speech and record.group == group),
        key=_ordering,
    )
    ranked: List[RankedTerm] = []
    rank = 0
    previous: Optional[float] = None
    for record in selected:
        if previous is None or record.tf_idf != previous:
            rank += 1
            previous = record.tf_idf
        ranked.append(RankedTerm(record=record, rank=rank))
    return ranked


def top_terms_per_group(
    records: Iterable[TfIdfRecord],
    n: int,
    part_of_speech: Optional[str] = None,
) -> Dict[str, List[TfIdfRecord]]:
    """Return the ``n`` highest tf-idf records per group, keeping ties at the cut-off."""
    if n < 1:
        raise ValueError("n must be at least 1.")

    by_group: Dict[str, List[TfIdfRecord]] = defaultdict(list)
    for record in records:
        if part_of_speech is not None and record.part_of_speech != part_of_speech:
            continue
        by_group[record.group].append(record)

    result: Dict[str, List[TfIdfRecord]] = {}
    for group in sorted(by_group):
        ordered = sorted(by_group[group], key=_ordering)
        if len(ordered) > n:
            cutoff = ordered[n - 1].tf_idf
            ordered = [record for record in ordered if record.tf_idf >= cutoff]
        result[group] = ordered
    return result


def _ordering(record: TfIdfRecord) -> Tuple[float, str, str, str]:
    return (-record.tf_idf, record.lemma, record.group, record.part_of_speech)


__all__ = ["RankedTerm", "Term", "TfIdfRecord", "rank_terms", "score_tf_idf", "top_terms_per_group"]
