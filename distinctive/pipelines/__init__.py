"""Pipeline orchestration and display helpers."""

from .distinctive_terms import DistinctiveTermsRequest, DistinctiveTermsResult, run_distinctive_terms
from .tables import coefficient_frame, path_frame, ranked_terms_frame, tf_idf_frame, top_terms_frame

__all__ = [
    "DistinctiveTermsRequest",
    "DistinctiveTermsResult",
    "coefficient_frame",
    "path_frame",
    "ranked_terms_frame",
    "run_distinctive_terms",
    "tf_idf_frame",
    "top_terms_frame",
]
