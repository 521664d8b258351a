"""Document-term count matrices restricted to a set of documents."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Collection, Dict, Iterable, Optional, Sequence, Tuple, Union

import numpy as np
from scipy import sparse

from ..corpus.records import Document, Token
from ..corpus.sources import GroupSource, MappingGroupSource
from ..errors import EmptyVocabularyError, UnmappedDocumentError


@dataclass(frozen=True, eq=False)
class SparseMatrix:
    """Raw lemma counts with row and column labels.

    Rows follow ``document_ids`` and columns follow ``vocabulary``; the column
    order defines the index alignment of fitted coefficient vectors.
    """

    matrix: sparse.csr_matrix
    document_ids: Tuple[str, ...]
    vocabulary: Tuple[str, ...]

    def __post_init__(self) -> None:
        expected = (len(self.document_ids), len(self.vocabulary))
        if self.matrix.shape != expected:
            raise ValueError(f"Matrix shape {self.matrix.shape} does not match labels {expected}.")

    @property
    def shape(self) -> Tuple[int, int]:
        return self.matrix.shape

    def column_index(self) -> Dict[str, int]:
        return {lemma: idx for idx, lemma in enumerate(self.vocabulary)}


def build_sparse_matrix(
    tokens: Iterable[Token],
    document_ids: Collection[str],
    vocabulary: Optional[Sequence[str]] = None,
    parts_of_speech: Optional[Collection[str]] = None,
) -> SparseMatrix:
    """Count lemmas per document for the documents in ``document_ids``.

    Args:
        tokens: Annotated tokens for the whole corpus.
        document_ids: Documents allowed into the matrix (e.g. the training split).
        vocabulary: Fixed column set. When given, lemmas outside it are dropped,
            which is how a test split is projected onto training features.
        parts_of_speech: Optional part-of-speech filter applied before counting.

    Raises:
        EmptyVocabularyError: No token qualifies.
    """
    allowed = set(document_ids)
    pos_filter = set(parts_of_speech) if parts_of_speech is not None else None

    cells: Dict[Tuple[str, str], int] = defaultdict(int)
    rows_seen: set[str] = set()
    for token in tokens:
        if token.document_id not in allowed:
            continue
        if pos_filter is not None and token.part_of_speech not in pos_filter:
            continue
        rows_seen.add(token.document_id)
        cells[(token.document_id, token.lemma)] += 1

    if not rows_seen:
        raise EmptyVocabularyError("No tokens fall inside the requested documents.")

    if vocabulary is None:
        columns = tuple(sorted({lemma for _, lemma in cells}))
    else:
        columns = tuple(vocabulary)
        if len(set(columns)) != len(columns):
            raise ValueError("Vocabulary entries must be unique.")
    rows = tuple(sorted(rows_seen))

    row_index = {document_id: idx for idx, document_id in enumerate(rows)}
    column_index = {lemma: idx for idx, lemma in enumerate(columns)}

    row_ids, col_ids, values = [], [], []
    for (document_id, lemma), count in cells.items():
        col = column_index.get(lemma)
        if col is None:
            continue
        row_ids.append(row_index[document_id])
        col_ids.append(col)
        values.append(float(count))

    matrix = sparse.coo_matrix(
        (np.asarray(values, dtype=np.float64), (np.asarray(row_ids, dtype=np.int64), np.asarray(col_ids, dtype=np.int64))),
        shape=(len(rows), len(columns)),
    ).tocsr()
    matrix.sort_indices()
    return SparseMatrix(matrix=matrix, document_ids=rows, vocabulary=columns)


def build_labels(
    matrix: SparseMatrix,
    documents: Union[Iterable[Document], GroupSource],
    target_group: str,
) -> np.ndarray:
    """Boolean label per matrix row: True iff the row's document is in ``target_group``."""
    source = documents if hasattr(documents, "group_for") else MappingGroupSource.from_documents(documents)  # type: ignore[arg-type]
    labels = np.zeros(len(matrix.document_ids), dtype=bool)
    for idx, document_id in enumerate(matrix.document_ids):
        group = source.group_for(document_id)  # type: ignore[union-attr]
        if group is None:
            raise UnmappedDocumentError(document_id)
        labels[idx] = group == target_group
    return labels


__all__ = ["SparseMatrix", "build_labels", "build_sparse_matrix"]
