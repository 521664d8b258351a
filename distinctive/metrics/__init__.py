"""Term-importance and classifier evaluation metrics."""

from .classification import HoldoutReport, evaluate_holdout
from .tfidf import RankedTerm, TfIdfRecord, rank_terms, score_tf_idf, top_terms_per_group

__all__ = [
    "HoldoutReport",
    "RankedTerm",
    "TfIdfRecord",
    "evaluate_holdout",
    "rank_terms",
    "score_tf_idf",
    "top_terms_per_group",
]
