"""Hold-out evaluation of a fitted LASSO classifier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.metrics import accuracy_score, roc_auc_score

from ..features.sparse import SparseMatrix
from ..probes.base import LabelLike
from ..probes.helpers import ensure_1d_array, ensure_aligned
from ..probes.lasso_cv import LassoLogisticClassifier


@dataclass(frozen=True)
class HoldoutReport:
    """Accuracy and ROC AUC on documents unseen during fitting."""

    n_documents: int
    accuracy: float
    roc_auc: Optional[float]
    threshold: float
    lambda_: float


def evaluate_holdout(
    classifier: LassoLogisticClassifier,
    matrix: SparseMatrix,
    labels: LabelLike,
    lambda_: Optional[float] = None,
    threshold: float = 0.5,
) -> HoldoutReport:
    """Score ``classifier`` on a test matrix built with the training vocabulary.

    ROC AUC is None when the test labels contain a single class.
    """
    if not 0.0 < threshold < 1.0:
        raise ValueError("threshold must fall within (0, 1).")
    y = ensure_1d_array(labels).astype(bool)
    ensure_aligned(matrix, y)
    path = classifier.path
    if path is None:
        raise RuntimeError("Classifier must be fitted before hold-out evaluation.")
    lam = path.lambda_1se if lambda_ is None else float(lambda_)

    probabilities = classifier.predict_proba(matrix, lam)[:, 1]
    predicted = probabilities >= threshold
    roc_auc: Optional[float] = None
    if np.unique(y).size == 2:
        roc_auc = float(roc_auc_score(y, probabilities))

    return HoldoutReport(
        n_documents=int(y.shape[0]),
        accuracy=float(accuracy_score(y, predicted)),
        roc_auc=roc_auc,
        threshold=threshold,
        lambda_=lam,
    )


__all__ = ["HoldoutReport", "evaluate_holdout"]
