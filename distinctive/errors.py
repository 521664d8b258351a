"""Error taxonomy raised at stage boundaries of the distinctive-terms pipeline."""

from __future__ import annotations


class DistinctiveTermsError(Exception):
    """Base class for every domain failure raised by this package."""


class UnmappedDocumentError(DistinctiveTermsError):
    """A token or matrix row references a document with no group."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document '{document_id}' has no group assignment.")
        self.document_id = document_id

    def __reduce__(self):
        return (type(self), (self.document_id,))


class InvalidProportionError(DistinctiveTermsError, ValueError):
    """Train/test split configuration cannot produce a valid partition."""


class EmptyVocabularyError(DistinctiveTermsError):
    """No qualifying tokens remain after filtering, so there are no features."""


class ConvergenceError(DistinctiveTermsError):
    """The path solver exhausted its iteration budget at some lambda."""

    def __init__(self, message: str, lambda_: float | None = None) -> None:
        super().__init__(message)
        self.lambda_ = lambda_

    def __reduce__(self):
        # Keep lambda_ when re-raised from a joblib worker.
        return (type(self), (str(self), self.lambda_))


class DegenerateLabelsError(DistinctiveTermsError):
    """The label vector has no positive or no negative examples."""


__all__ = [
    "ConvergenceError",
    "DegenerateLabelsError",
    "DistinctiveTermsError",
    "EmptyVocabularyError",
    "InvalidProportionError",
    "UnmappedDocumentError",
]
