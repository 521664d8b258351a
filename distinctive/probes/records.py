"""Shared records for the regularisation path and ranked coefficients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Literal, Optional, Tuple

import numpy as np

SignGroup = Literal["positive", "negative"]


@dataclass(frozen=True)
class PathStep:
    """Non-zero coefficients at a single lambda."""

    lambda_: float
    intercept: float
    coefficients: Dict[str, float]


@dataclass(frozen=True)
class RankedCoefficient:
    """Coefficient estimate with the side of the decision boundary it pushes towards."""

    term: str
    estimate: float
    sign_group: SignGroup


@dataclass(frozen=True, eq=False)
class RegularizationPath:
    """Cross-validated L1 logistic regression path.

    ``lambdas`` are strictly decreasing; row ``i`` of ``coefficients`` holds
    the original-scale coefficients at ``lambdas[i]`` with columns aligned to
    ``vocabulary``. ``cv_mean``/``cv_sd`` hold the mean held-out binomial
    deviance and its standard error.
    """

    lambdas: np.ndarray
    vocabulary: Tuple[str, ...]
    intercepts: np.ndarray
    coefficients: np.ndarray
    cv_mean: np.ndarray
    cv_sd: np.ndarray
    deviance_ratio: np.ndarray
    lambda_min: float
    lambda_1se: float
    n_folds: int

    def __post_init__(self) -> None:
        n_lambdas = self.lambdas.shape[0]
        if self.coefficients.shape != (n_lambdas, len(self.vocabulary)):
            raise ValueError("Coefficient matrix does not match lambdas × vocabulary.")
        for name in ("intercepts", "cv_mean", "cv_sd", "deviance_ratio"):
            if getattr(self, name).shape != (n_lambdas,):
                raise ValueError(f"{name} must have one entry per lambda.")

    def __len__(self) -> int:
        return int(self.lambdas.shape[0])

    @property
    def n_nonzero(self) -> np.ndarray:
        return np.count_nonzero(self.coefficients, axis=1)

    def steps(self) -> Iterator[PathStep]:
        """Yield each lambda with its non-zero coefficients, largest lambda first."""
        for idx, lam in enumerate(self.lambdas):
            row = self.coefficients[idx]
            nonzero = np.flatnonzero(row)
            yield PathStep(
                lambda_=float(lam),
                intercept=float(self.intercepts[idx]),
                coefficients={self.vocabulary[j]: float(row[j]) for j in nonzero},
            )

    def index_of(self, lambda_: float) -> Optional[int]:
        """Index of ``lambda_`` on the grid, or None when it falls between grid points."""
        matches = np.flatnonzero(np.isclose(self.lambdas, lambda_, rtol=1e-10, atol=0.0))
        return int(matches[0]) if matches.size else None

    def coefficients_at(self, lambda_: float) -> np.ndarray:
        """Coefficients at ``lambda_``, linearly interpolated between grid points."""
        left, right, frac = self._interpolation(lambda_)
        return frac * self.coefficients[left] + (1.0 - frac) * self.coefficients[right]

    def intercept_at(self, lambda_: float) -> float:
        left, right, frac = self._interpolation(lambda_)
        return float(frac * self.intercepts[left] + (1.0 - frac) * self.intercepts[right])

    def _interpolation(self, lambda_: float) -> Tuple[int, int, float]:
        if not np.isfinite(lambda_) or lambda_ <= 0:
            raise ValueError(f"lambda must be a positive finite number, got {lambda_}.")
        exact = self.index_of(lambda_)
        if exact is not None:
            return exact, exact, 1.0
        # Clamp outside the fitted range.
        if lambda_ >= self.lambdas[0]:
            return 0, 0, 1.0
        if lambda_ <= self.lambdas[-1]:
            last = len(self) - 1
            return last, last, 1.0
        right = int(np.flatnonzero(self.lambdas < lambda_)[0])
        left = right - 1
        frac = (lambda_ - self.lambdas[right]) / (self.lambdas[left] - self.lambdas[right])
        return left, right, float(frac)


__all__ = ["PathStep", "RankedCoefficient", "RegularizationPath", "SignGroup"]
