"""Reproducible train/test partitioning of document identifiers."""

from __future__ import annotations

import math
from collections import Counter
from typing import Mapping, Optional, Sequence

from sklearn.model_selection import train_test_split

from ..errors import InvalidProportionError
from .records import DocumentSplit


def training_size(n_documents: int, proportion: float) -> int:
    """Number of training documents: ``floor(proportion * n)``.

    The product is rounded to 9 decimals first so that values such as
    ``0.29 * 100`` (28.999999999999996 in binary floating point) floor to 29.
    """
    return int(math.floor(round(proportion * n_documents, 9)))


def split_documents(
    document_ids: Sequence[str],
    proportion: float,
    seed: int,
    strata: Optional[Mapping[str, str]] = None,
) -> DocumentSplit:
    """Partition ``document_ids`` into training and test sets.

    Args:
        document_ids: Identifiers to partition; order matters for reproducibility.
        proportion: Fraction of documents assigned to training, in (0, 1).
        seed: Random state forwarded to scikit-learn's shuffler.
        strata: Optional document_id → stratum mapping for a stratified split.
            Falls back to an unstratified split when a stratum is too small.

    Raises:
        InvalidProportionError: Proportion outside (0, 1), empty input, or a
            rounding that leaves one side empty.
    """
    if not 0.0 < proportion < 1.0:
        raise InvalidProportionError(f"Split proportion must fall within (0, 1), got {proportion}.")
    ids = [str(document_id) for document_id in document_ids]
    if not ids:
        raise InvalidProportionError("Cannot split an empty collection of documents.")
    if len(set(ids)) != len(ids):
        raise ValueError("Document identifiers must be unique.")

    n_train = training_size(len(ids), proportion)
    if n_train == 0 or n_train == len(ids):
        raise InvalidProportionError(
            f"Proportion {proportion} leaves an empty side when splitting {len(ids)} documents."
        )

    stratify = None
    if strata is not None:
        missing = [document_id for document_id in ids if document_id not in strata]
        if missing:
            raise ValueError(f"No stratum for documents: {', '.join(missing[:5])}")
        labels = [strata[document_id] for document_id in ids]
        if _can_stratify(labels, n_train, len(ids) - n_train):
            stratify = labels
        else:
            print("[split] Some groups are too small to stratify; using an unstratified split")

    training, test = train_test_split(
        ids,
        train_size=n_train,
        random_state=seed,
        shuffle=True,
        stratify=stratify,
    )
    return DocumentSplit(training=tuple(training), test=tuple(test))


def _can_stratify(labels: Sequence[str], n_train: int, n_test: int) -> bool:
    """Every stratum needs two members and a slot on each side of the split."""
    sizes = Counter(labels)
    return min(sizes.values()) >= 2 and len(sizes) <= min(n_train, n_test)


__all__ = ["split_documents", "training_size"]
