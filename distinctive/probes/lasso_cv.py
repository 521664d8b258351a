"""Cross-validated LASSO logistic regression over sparse document-term counts."""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np
from joblib import Parallel, delayed
from scipy import sparse
from scipy.special import expit
from sklearn.model_selection import StratifiedKFold

from ..errors import DegenerateLabelsError
from ..features.sparse import SparseMatrix
from .base import BaseProbe, LabelLike
from .helpers import ensure_1d_array, ensure_aligned, ensure_vocabulary
from .lasso_path import LassoConfig, as_binary_labels, binomial_deviance, fit_lasso_path, lambda_sequence
from .records import RegularizationPath


class LassoLogisticClassifier(BaseProbe):
    """L1-penalised logistic regression with k-fold selection of lambda."""

    def __init__(self, config: Optional[LassoConfig] = None) -> None:
        self.config = config or LassoConfig()
        self.path: Optional[RegularizationPath] = None

    def fit(self, matrix: SparseMatrix, labels: LabelLike) -> "LassoLogisticClassifier":
        """Fit the full path, cross-validate it and pick ``lambda_min`` / ``lambda_1se``.

        Raises:
            DegenerateLabelsError: Labels (or a training fold) hold a single class.
            ConvergenceError: The solver fails at some lambda, on the full data or a fold.
        """
        cfg = self.config
        cfg.validate()
        raw_labels = ensure_1d_array(labels)
        ensure_aligned(matrix, raw_labels)
        n_samples = matrix.shape[0]
        if cfg.n_folds > n_samples:
            raise ValueError(f"n_folds ({cfg.n_folds}) cannot exceed the number of documents ({n_samples}).")
        y = as_binary_labels(raw_labels)

        X = sparse.csr_matrix(matrix.matrix, dtype=np.float64)
        full = fit_lasso_path(X, y, lambda_sequence(X, y, cfg), cfg)
        lambdas = full.lambdas
        if cfg.verbose:
            print(f"[lasso] Full fit: {full.n_fitted} lambdas, {X.shape[0]} documents × {X.shape[1]} lemmas")

        folds = StratifiedKFold(n_splits=cfg.n_folds, shuffle=True, random_state=cfg.random_state)
        splits = list(folds.split(np.zeros(n_samples), y.astype(int)))
        results = Parallel(n_jobs=cfg.n_jobs)(
            delayed(_fold_deviance)(X, y, train_idx, test_idx, lambdas, cfg, fold)
            for fold, (train_idx, test_idx) in enumerate(splits)
        )

        # Reduce in fold order so serial and parallel runs agree bit for bit.
        fold_errors: List[np.ndarray] = []
        for fold, (errors, fitted) in enumerate(results):
            fold_errors.append(errors)
            if cfg.verbose:
                print(f"[lasso] Fold {fold + 1}/{cfg.n_folds}: {fitted} lambdas fitted")
        weights = np.asarray([len(test_idx) for _, test_idx in splits], dtype=np.float64)
        cv_mean, cv_sd = _cv_summary(np.vstack(fold_errors), weights)
        idx_min, idx_1se = _select_lambdas(cv_mean, cv_sd)

        self.path = RegularizationPath(
            lambdas=lambdas,
            vocabulary=tuple(matrix.vocabulary),
            intercepts=full.intercepts,
            coefficients=full.coefficients,
            cv_mean=cv_mean,
            cv_sd=cv_sd,
            deviance_ratio=full.deviance_ratio,
            lambda_min=float(lambdas[idx_min]),
            lambda_1se=float(lambdas[idx_1se]),
            n_folds=cfg.n_folds,
        )
        if cfg.verbose:
            print(f"[lasso] lambda_min={self.path.lambda_min:.6g} lambda_1se={self.path.lambda_1se:.6g}")
        return self

    def decision_function(self, matrix: SparseMatrix, lambda_: Optional[float] = None) -> np.ndarray:
        path = self._require_path()
        ensure_vocabulary(matrix, path.vocabulary)
        lam = path.lambda_1se if lambda_ is None else lambda_
        return np.asarray(matrix.matrix @ path.coefficients_at(lam)).ravel() + path.intercept_at(lam)

    def predict_proba(self, matrix: SparseMatrix, lambda_: Optional[float] = None) -> np.ndarray:
        """Class probabilities as an ``(n, 2)`` array, positive class in column 1."""
        positive = expit(self.decision_function(matrix, lambda_))
        return np.stack([1.0 - positive, positive], axis=1)

    def predict(self, matrix: SparseMatrix, lambda_: Optional[float] = None, threshold: float = 0.5) -> np.ndarray:
        return self.predict_proba(matrix, lambda_)[:, 1] >= threshold

    def _require_path(self) -> RegularizationPath:
        if self.path is None:
            raise RuntimeError("LassoLogisticClassifier has not been fitted yet.")
        return self.path


def fit_lasso_cv(
    matrix: SparseMatrix,
    labels: LabelLike,
    config: Optional[LassoConfig] = None,
) -> RegularizationPath:
    """Fit the classifier and return its regularisation path in one call."""
    return LassoLogisticClassifier(config).fit(matrix, labels)._require_path()


def _fold_deviance(
    X: sparse.csr_matrix,
    y: np.ndarray,
    train_idx: np.ndarray,
    test_idx: np.ndarray,
    lambdas: np.ndarray,
    config: LassoConfig,
    fold: int,
) -> Tuple[np.ndarray, int]:
    """Mean held-out deviance per lambda for one fold, plus the number of lambdas fitted."""
    y_train = y[train_idx]
    if y_train.min() == y_train.max():
        raise DegenerateLabelsError(f"Training data for fold {fold + 1} contains a single class.")
    fit = fit_lasso_path(X[train_idx], y_train, lambdas, config)
    intercepts, coefficients = fit.padded(lambdas.shape[0])
    eta = np.asarray(X[test_idx] @ coefficients.T) + intercepts
    deviance = binomial_deviance(y[test_idx][:, None], expit(eta))
    return deviance.mean(axis=0), fit.n_fitted


def _cv_summary(errors: np.ndarray, weights: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Fold-size weighted mean error and its standard error per lambda."""
    total = weights.sum()
    mean = weights @ errors / total
    variance = weights @ (errors - mean) ** 2 / total
    return mean, np.sqrt(variance / (errors.shape[0] - 1))


def _select_lambdas(cv_mean: np.ndarray, cv_sd: np.ndarray) -> Tuple[int, int]:
    """Indices of ``lambda_min`` and ``lambda_1se`` on a decreasing lambda grid."""
    best = cv_mean.min()
    # First index on a decreasing grid is the largest qualifying lambda.
    idx_min = int(np.flatnonzero(cv_mean <= best)[0])
    idx_1se = int(np.flatnonzero(cv_mean <= best + cv_sd[idx_min])[0])
    return idx_min, idx_1se


__all__ = ["LassoLogisticClassifier", "fit_lasso_cv"]
