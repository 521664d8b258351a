"""Aggregate annotated tokens into (group, lemma, part_of_speech) counts."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple, Union

from ..errors import UnmappedDocumentError
from .records import CountRecord, Document, Token
from .sources import GroupSource, MappingGroupSource

CountKey = Tuple[str, str, str]


def count_tokens(
    tokens: Iterable[Token],
    documents: Union[Iterable[Document], GroupSource],
) -> List[CountRecord]:
    """Count tokens per (group, lemma, part_of_speech).

    Args:
        tokens: Annotated tokens, many per document.
        documents: Document records or any GroupSource resolving document ids to groups.

    Returns:
        One CountRecord per distinct key, in first-seen order.

    Raises:
        UnmappedDocumentError: A token references a document without a group.
    """
    source = _as_group_source(documents)

    counts: Dict[CountKey, int] = defaultdict(int)
    for token in tokens:
        group = source.group_for(token.document_id)
        if group is None:
            raise UnmappedDocumentError(token.document_id)
        counts[(group, token.lemma, token.part_of_speech)] += 1

    return [
        CountRecord(group=group, lemma=lemma, part_of_speech=part_of_speech, count=count)
        for (group, lemma, part_of_speech), count in counts.items()
    ]


def group_totals(counts: Iterable[CountRecord]) -> Dict[str, int]:
    """Sum counts per group."""
    totals: Dict[str, int] = defaultdict(int)
    for record in counts:
        totals[record.group] += record.count
    return dict(totals)


def _as_group_source(documents: Union[Iterable[Document], GroupSource]) -> GroupSource:
    if hasattr(documents, "group_for"):
        return documents  # type: ignore[return-value]
    return MappingGroupSource.from_documents(documents)  # type: ignore[arg-type]


__all__ = ["CountKey", "count_tokens", "group_totals"]
