"""Array conversion helpers shared across classifier implementations."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..features.sparse import SparseMatrix
from .base import LabelLike


def ensure_1d_array(values: LabelLike, *, name: str = "labels") -> np.ndarray:
    """Coerce labels into a non-empty 1-D numpy array."""
    arr = np.asarray(values)
    if arr.size == 0:
        raise ValueError(f"{name} cannot be empty")
    if arr.ndim != 1:
        raise ValueError(f"{name} must be 1-D (batch,), got shape {arr.shape}")
    return arr


def ensure_aligned(matrix: SparseMatrix, labels: np.ndarray) -> None:
    """Check that labels line up with the matrix rows."""
    if matrix.shape[0] != labels.shape[0]:
        raise ValueError(f"Feature rows ({matrix.shape[0]}) and label count ({labels.shape[0]}) must match")


def ensure_vocabulary(matrix: SparseMatrix, vocabulary: Sequence[str]) -> None:
    """Check that ``matrix`` columns follow the fitted vocabulary."""
    if tuple(matrix.vocabulary) != tuple(vocabulary):
        raise ValueError(
            "Matrix columns differ from the fitted vocabulary; build it with vocabulary=path.vocabulary."
        )
