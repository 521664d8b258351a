"""Common classifier interfaces and shared typing aliases."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, Union

import numpy as np

from ..features.sparse import SparseMatrix

LabelLike = Union[np.ndarray, Sequence[bool], Sequence[int]]


class BaseProbe(Protocol):
    """Protocol describing the surface a document-term classifier exposes."""

    def fit(self, matrix: SparseMatrix, labels: LabelLike) -> "BaseProbe": ...

    def predict(self, matrix: SparseMatrix, lambda_: Optional[float] = None) -> np.ndarray: ...

    def predict_proba(self, matrix: SparseMatrix, lambda_: Optional[float] = None) -> np.ndarray: ...
