"""Convert result records into pandas DataFrames for display."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

import pandas as pd

from ..metrics.tfidf import RankedTerm, TfIdfRecord
from ..probes.records import RankedCoefficient, RegularizationPath

TFIDF_COLUMNS = ["group", "lemma", "part_of_speech", "count", "tf", "idf", "tf_idf"]


def tf_idf_frame(records: Iterable[TfIdfRecord]) -> pd.DataFrame:
    rows = [
        (r.group, r.lemma, r.part_of_speech, r.count, r.tf, r.idf, r.tf_idf)
        for r in records
    ]
    return pd.DataFrame(rows, columns=TFIDF_COLUMNS)


def ranked_terms_frame(ranked: Sequence[RankedTerm]) -> pd.DataFrame:
    frame = tf_idf_frame(item.record for item in ranked)
    frame.insert(0, "rank", [item.rank for item in ranked])
    return frame


def top_terms_frame(per_group: Mapping[str, Sequence[TfIdfRecord]]) -> pd.DataFrame:
    return tf_idf_frame(record for records in per_group.values() for record in records)


def coefficient_frame(coefficients: Iterable[RankedCoefficient]) -> pd.DataFrame:
    rows = [(c.term, c.estimate, c.sign_group) for c in coefficients]
    return pd.DataFrame(rows, columns=["term", "estimate", "sign_group"])


def path_frame(path: RegularizationPath) -> pd.DataFrame:
    """One row per lambda with cross-validation error and model size."""
    frame = pd.DataFrame(
        {
            "lambda": path.lambdas,
            "n_nonzero": path.n_nonzero,
            "cv_mean": path.cv_mean,
            "cv_sd": path.cv_sd,
            "deviance_ratio": path.deviance_ratio,
        }
    )
    frame["selected"] = ""
    frame.loc[frame["lambda"] == path.lambda_min, "selected"] = "min"
    # lambda_1se wins the label when both point at the same row.
    frame.loc[frame["lambda"] == path.lambda_1se, "selected"] = "1se"
    return frame


__all__ = ["coefficient_frame", "path_frame", "ranked_terms_frame", "tf_idf_frame", "top_terms_frame"]
