"""Rank path coefficients at a chosen lambda."""

from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np

from .records import RankedCoefficient, RegularizationPath


class CoefficientExtractor:
    """Coefficient table at one lambda of a fitted path (``lambda_1se`` by default).

    The intercept is tracked by the path and never appears in the table.
    """

    def __init__(self, path: RegularizationPath, lambda_: Optional[float] = None) -> None:
        self.path = path
        self.lambda_ = path.lambda_1se if lambda_ is None else float(lambda_)
        self._estimates = path.coefficients_at(self.lambda_)
        self._index: Dict[str, int] = {term: idx for idx, term in enumerate(path.vocabulary)}

    def ranked(self, top_n: int) -> List[RankedCoefficient]:
        """Top ``top_n`` positive and top ``top_n`` negative estimates, sorted by signed estimate."""
        if top_n < 1:
            raise ValueError("top_n must be at least 1.")
        estimates = self._estimates
        positive = list(np.flatnonzero(estimates > 0))
        negative = list(np.flatnonzero(estimates < 0))
        terms = self.path.vocabulary

        # Magnitude first, term as a deterministic tie-breaker.
        positive.sort(key=lambda idx: (-abs(estimates[idx]), terms[idx]))
        negative.sort(key=lambda idx: (-abs(estimates[idx]), terms[idx]))

        table = [
            RankedCoefficient(term=terms[idx], estimate=float(estimates[idx]), sign_group="positive")
            for idx in positive[:top_n]
        ]
        table.extend(
            RankedCoefficient(term=terms[idx], estimate=float(estimates[idx]), sign_group="negative")
            for idx in negative[:top_n]
        )
        table.sort(key=lambda row: (-row.estimate, row.term))
        return table

    def lookup(self, term: str) -> Optional[float]:
        """Estimate for ``term``; 0.0 when shrunk away, None when never seen in training."""
        idx = self._index.get(term)
        if idx is None:
            return None
        return float(self._estimates[idx])

    def nonzero(self) -> Dict[str, float]:
        return {self.path.vocabulary[idx]: float(self._estimates[idx]) for idx in np.flatnonzero(self._estimates)}


def extract_coefficients(
    path: RegularizationPath,
    lambda_: Optional[float] = None,
    top_n: int = 10,
) -> List[RankedCoefficient]:
    """Ranked coefficient table at ``lambda_`` (defaults to ``lambda_1se``)."""
    return CoefficientExtractor(path, lambda_).ranked(top_n)


__all__ = ["CoefficientExtractor", "extract_coefficients"]
