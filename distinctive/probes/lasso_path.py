"""Coordinate-descent solver for the L1-penalised logistic regression path.

The solver follows the usual pathwise recipe: a geometric lambda sequence
starting at the smallest penalty that zeroes every coefficient, warm starts
from one lambda to the next, a proximal Newton (IRLS) outer loop and cyclic
coordinate descent with soft-thresholding on the quadratic approximation.
Columns are standardised implicitly so the sparse count matrix is never
densified; the intercept is unpenalised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from scipy import sparse
from scipy.special import expit

from ..errors import ConvergenceError, DegenerateLabelsError, EmptyVocabularyError

# Fitted probabilities are clipped to [PROBABILITY_FLOOR, 1 - PROBABILITY_FLOOR].
PROBABILITY_FLOOR = 1e-5
# Path truncation: stop once the explained deviance saturates or stalls.
MAX_DEVIANCE_RATIO = 0.999
MIN_DEVIANCE_GAIN = 1e-5
MIN_PATH_LENGTH = 5


@dataclass
class LassoConfig:
    """Settings for the regularisation path and its cross-validation."""

    n_lambdas: int = 100
    # None picks 0.01 when samples < features and 1e-4 otherwise.
    lambda_min_ratio: Optional[float] = None
    standardize: bool = True
    tol: float = 1e-7
    max_iter: int = 100_000  # coordinate-descent passes per lambda
    max_newton_iter: int = 50
    n_folds: int = 10
    n_jobs: Optional[int] = None
    random_state: int = 42
    verbose: bool = False

    def validate(self) -> None:
        if self.n_lambdas < 2:
            raise ValueError("n_lambdas must be at least 2.")
        if self.lambda_min_ratio is not None and not 0.0 < self.lambda_min_ratio < 1.0:
            raise ValueError("lambda_min_ratio must fall within (0, 1).")
        if self.tol <= 0:
            raise ValueError("tol must be strictly positive.")
        if self.max_iter < 1 or self.max_newton_iter < 1:
            raise ValueError("Iteration budgets must be at least 1.")
        if self.n_folds < 3:
            raise ValueError("n_folds must be at least 3.")

    def resolve_min_ratio(self, n_samples: int, n_features: int) -> float:
        if self.lambda_min_ratio is not None:
            return self.lambda_min_ratio
        return 0.01 if n_samples < n_features else 1e-4


@dataclass(frozen=True, eq=False)
class PathFit:
    """Coefficients for each lambda actually fitted, on the original feature scale."""

    lambdas: np.ndarray
    intercepts: np.ndarray
    coefficients: np.ndarray
    deviance_ratio: np.ndarray
    null_deviance: float

    @property
    def n_fitted(self) -> int:
        return int(self.lambdas.shape[0])

    def padded(self, n_lambdas: int) -> Tuple[np.ndarray, np.ndarray]:
        """Intercepts and coefficients extended to ``n_lambdas`` rows by repeating the last solution."""
        missing = n_lambdas - self.n_fitted
        if missing <= 0:
            return self.intercepts[:n_lambdas], self.coefficients[:n_lambdas]
        intercepts = np.concatenate([self.intercepts, np.repeat(self.intercepts[-1:], missing)])
        coefficients = np.vstack([self.coefficients, np.repeat(self.coefficients[-1:], missing, axis=0)])
        return intercepts, coefficients


@dataclass(frozen=True, eq=False)
class _Design:
    """Sparse design matrix with implicit centring and scaling."""

    X: sparse.csc_matrix
    X_squared: sparse.csc_matrix
    center: np.ndarray
    scale: np.ndarray
    usable: np.ndarray

    @classmethod
    def build(cls, matrix: sparse.spmatrix, standardize: bool) -> "_Design":
        X = sparse.csc_matrix(matrix, dtype=np.float64)
        X.sort_indices()
        X_squared = X.multiply(X).tocsc()
        center = np.asarray(X.mean(axis=0)).ravel()
        second_moment = np.asarray(X_squared.mean(axis=0)).ravel()
        variance = np.maximum(second_moment - center**2, 0.0)
        # Constant columns carry no signal and keep a zero coefficient.
        usable = variance > 1e-12 * np.maximum(second_moment, 1.0)
        if standardize:
            scale = np.where(usable, np.sqrt(variance), 1.0)
        else:
            scale = np.ones_like(center)
        return cls(X=X, X_squared=X_squared, center=center, scale=scale, usable=usable)

    @property
    def n_samples(self) -> int:
        return int(self.X.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.X.shape[1])

    def linear_predictor(self, intercept: float, beta: np.ndarray) -> np.ndarray:
        raw = beta / self.scale
        return self.X @ raw + (intercept - float(self.center @ raw))

    def gradient(self, residual: np.ndarray) -> np.ndarray:
        """Standardised-scale gradient ``X̃ᵀ residual / n``."""
        total = float(residual.sum())
        return (self.X.T @ residual - self.center * total) / self.scale / self.n_samples

    def to_original(self, intercept: float, beta: np.ndarray) -> Tuple[float, np.ndarray]:
        raw = beta / self.scale
        return intercept - float(self.center @ raw), raw


def binomial_deviance(y: np.ndarray, probabilities: np.ndarray) -> np.ndarray:
    """Per-observation binomial deviance with clipped probabilities."""
    p = np.clip(probabilities, PROBABILITY_FLOOR, 1.0 - PROBABILITY_FLOOR)
    return -2.0 * (y * np.log(p) + (1.0 - y) * np.log(1.0 - p))


def as_binary_labels(labels: np.ndarray) -> np.ndarray:
    y = np.asarray(labels).astype(np.float64)
    if y.ndim != 1:
        raise ValueError(f"labels must be 1-D, got shape {y.shape}")
    if not np.all((y == 0.0) | (y == 1.0)):
        raise ValueError("labels must be boolean or 0/1 valued.")
    positives = int(y.sum())
    if positives == 0 or positives == y.shape[0]:
        raise DegenerateLabelsError(
            f"Labels need both classes; got {positives} positive out of {y.shape[0]} examples."
        )
    return y


def lambda_sequence(matrix: sparse.spmatrix, labels: np.ndarray, config: LassoConfig) -> np.ndarray:
    """Geometric sequence from the smallest all-zero penalty down to ``lambda_max * min_ratio``."""
    config.validate()
    y = as_binary_labels(labels)
    design = _Design.build(matrix, config.standardize)
    if not design.usable.any():
        raise EmptyVocabularyError("Every feature column is constant; nothing to regularise.")
    gradient = design.gradient(y - y.mean())
    lambda_max = float(np.max(np.abs(gradient[design.usable])))
    lambda_max = max(lambda_max, np.finfo(np.float64).eps)
    ratio = config.resolve_min_ratio(design.n_samples, design.n_features)
    exponents = np.arange(config.n_lambdas, dtype=np.float64) / (config.n_lambdas - 1)
    return lambda_max * ratio**exponents


def fit_lasso_path(
    matrix: sparse.spmatrix,
    labels: np.ndarray,
    lambdas: np.ndarray,
    config: LassoConfig,
) -> PathFit:
    """Fit the penalised logistic regression at each lambda of a decreasing sequence.

    A design whose columns are all constant yields the intercept-only model
    at every lambda.

    Raises:
        DegenerateLabelsError: ``labels`` hold a single class.
        ConvergenceError: A Newton loop or the coordinate-pass budget is exhausted.
    """
    config.validate()
    y = as_binary_labels(labels)
    if matrix.shape[0] != y.shape[0]:
        raise ValueError(f"Feature rows ({matrix.shape[0]}) and label count ({y.shape[0]}) must match")
    lambdas = np.asarray(lambdas, dtype=np.float64)
    if lambdas.ndim != 1 or lambdas.size == 0 or np.any(np.diff(lambdas) >= 0) or np.any(lambdas <= 0):
        raise ValueError("lambdas must be a non-empty, strictly decreasing sequence of positive values.")

    solver = _PathSolver(_Design.build(matrix, config.standardize), y, config)
    return solver.run(lambdas)


class _PathSolver:
    """Warm-started proximal Newton / coordinate descent over a lambda sequence."""

    def __init__(self, design: _Design, y: np.ndarray, config: LassoConfig) -> None:
        self.design = design
        self.y = y
        self.config = config
        n = design.n_samples
        mean = float(y.mean())
        self.intercept = float(np.log(mean / (1.0 - mean)))
        self.beta = np.zeros(design.n_features, dtype=np.float64)
        self.null_deviance = float(binomial_deviance(y, np.full(n, mean)).sum())
        self._indptr = design.X.indptr
        self._indices = design.X.indices
        self._data = design.X.data

    def run(self, lambdas: np.ndarray) -> PathFit:
        design = self.design
        intercepts, coefficients, ratios = [], [], []
        gradient = design.gradient(self.y - expit(design.linear_predictor(self.intercept, self.beta)))
        previous_lambda = float(lambdas[0])

        for step, lam in enumerate(lambdas):
            lam = float(lam)
            gradient = self._solve(lam, previous_lambda, gradient)
            previous_lambda = lam

            intercept, raw = design.to_original(self.intercept, self.beta)
            intercepts.append(intercept)
            coefficients.append(raw.copy())
            eta = design.linear_predictor(self.intercept, self.beta)
            deviance = float(binomial_deviance(self.y, expit(eta)).sum())
            ratios.append(1.0 - deviance / self.null_deviance)

            if step + 1 >= MIN_PATH_LENGTH:
                if ratios[-1] > MAX_DEVIANCE_RATIO:
                    break
                if ratios[-1] - ratios[-2] < MIN_DEVIANCE_GAIN * ratios[-1]:
                    break

        fitted = len(intercepts)
        return PathFit(
            lambdas=lambdas[:fitted].copy(),
            intercepts=np.asarray(intercepts, dtype=np.float64),
            coefficients=np.vstack(coefficients),
            deviance_ratio=np.asarray(ratios, dtype=np.float64),
            null_deviance=self.null_deviance,
        )

    def _solve(self, lam: float, previous_lambda: float, gradient: np.ndarray) -> np.ndarray:
        """Solve at ``lam`` and return the gradient at the solution."""
        design = self.design
        if not design.usable.any():
            # Every column is constant here (e.g. a fold without the rare lemmas).
            return gradient
        if not self.beta.any() and np.max(np.abs(gradient[design.usable])) <= lam * (1.0 + 1e-9):
            # The intercept-only model already satisfies the KKT conditions.
            return gradient
        # Sequential strong rule: screen columns unlikely to enter at this lambda.
        strong = design.usable & ((self.beta != 0.0) | (np.abs(gradient) >= 2.0 * lam - previous_lambda))
        candidates = np.flatnonzero(strong)
        passes = 0

        while True:
            passes = self._newton(lam, candidates, passes)
            gradient = design.gradient(self.y - expit(design.linear_predictor(self.intercept, self.beta)))
            # KKT check on the screened-out columns.
            violations = design.usable & ~strong & (np.abs(gradient) > lam * (1.0 + 1e-6))
            if not violations.any():
                return gradient
            strong |= violations
            candidates = np.flatnonzero(strong)

    def _newton(self, lam: float, candidates: np.ndarray, passes: int) -> int:
        design = self.design
        n = design.n_samples
        for _ in range(self.config.max_newton_iter):
            eta = design.linear_predictor(self.intercept, self.beta)
            p = np.clip(expit(eta), PROBABILITY_FLOOR, 1.0 - PROBABILITY_FLOOR)
            w = p * (1.0 - p)
            residual = (self.y - p) / w
            w_sum = float(w.sum())
            xw = design.X.T @ w
            xxw = design.X_squared.T @ w
            curvature = (xxw - 2.0 * design.center * xw + design.center**2 * w_sum) / design.scale**2 / n

            beta_start = self.beta.copy()
            intercept_start = self.intercept
            passes = self._coordinate_descent(lam, candidates, w, residual, w_sum, xw, curvature, passes)

            delta = self.beta[candidates] - beta_start[candidates]
            change = float(np.max(curvature[candidates] * delta**2)) if candidates.size else 0.0
            change = max(change, w_sum / n * (self.intercept - intercept_start) ** 2)
            if change < self.config.tol:
                return passes
        raise ConvergenceError(
            f"Newton iterations did not converge within {self.config.max_newton_iter} steps at lambda={lam:.6g}.",
            lambda_=lam,
        )

    def _coordinate_descent(
        self,
        lam: float,
        candidates: np.ndarray,
        w: np.ndarray,
        residual: np.ndarray,
        w_sum: float,
        xw: np.ndarray,
        curvature: np.ndarray,
        passes: int,
    ) -> int:
        """Cyclic coordinate descent on the weighted least-squares approximation.

        ``residual`` holds the working residual minus a scalar ``offset`` that
        absorbs the centring terms, so every update touches only the non-zero
        rows of a column.
        """
        design = self.design
        n = design.n_samples
        indptr, indices, data = self._indptr, self._indices, self._data
        center, scale = design.center, design.scale
        offset = 0.0
        weighted_sum = float(w @ residual)

        while True:
            passes += 1
            if passes > self.config.max_iter:
                raise ConvergenceError(
                    f"Coordinate descent exceeded {self.config.max_iter} passes at lambda={lam:.6g}.",
                    lambda_=lam,
                )
            max_change = 0.0
            for j in candidates:
                v = curvature[j]
                if v <= 0.0:
                    continue
                lo, hi = indptr[j], indptr[j + 1]
                rows = indices[lo:hi]
                values = data[lo:hi]
                partial = float((w[rows] * values) @ residual[rows]) + offset * xw[j]
                grad = (partial - center[j] * weighted_sum) / scale[j] / n
                old = self.beta[j]
                z = grad + v * old
                new = np.sign(z) * max(abs(z) - lam, 0.0) / v
                if new == old:
                    continue
                d = new - old
                self.beta[j] = new
                residual[rows] -= d * values / scale[j]
                offset += d * center[j] / scale[j]
                weighted_sum -= d * (xw[j] - center[j] * w_sum) / scale[j]
                max_change = max(max_change, v * d * d)

            shift = weighted_sum / w_sum
            self.intercept += shift
            offset -= shift
            weighted_sum = 0.0
            max_change = max(max_change, w_sum / n * shift * shift)
            if max_change < self.config.tol:
                return passes


__all__ = [
    "LassoConfig",
    "PathFit",
    "as_binary_labels",
    "binomial_deviance",
    "fit_lasso_path",
    "lambda_sequence",
]
