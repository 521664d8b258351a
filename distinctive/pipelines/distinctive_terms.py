"""End-to-end orchestration: tf-idf tables plus the cross-validated LASSO fit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, cast

from ..corpus.config import DEFAULT_SEED, DEFAULT_TOP_N, DEFAULT_TRAIN_PROPORTION
from ..corpus.counting import count_tokens
from ..corpus.records import Document, DocumentSplit, Token
from ..corpus.sources import MappingGroupSource
from ..corpus.splitting import split_documents
from ..errors import EmptyVocabularyError
from ..features.sparse import SparseMatrix, build_labels, build_sparse_matrix
from ..metrics.classification import HoldoutReport, evaluate_holdout
from ..metrics.tfidf import TfIdfRecord, score_tf_idf
from ..probes.coefficients import CoefficientExtractor
from ..probes.lasso_cv import LassoLogisticClassifier
from ..probes.lasso_path import LassoConfig
from ..probes.records import RankedCoefficient, RegularizationPath


@dataclass(frozen=True)
class DistinctiveTermsRequest:
    """Describe which group to model and how to split and regularise."""

    target_group: str
    proportion: float = DEFAULT_TRAIN_PROPORTION
    seed: int = DEFAULT_SEED
    stratify: bool = True
    parts_of_speech: Optional[Tuple[str, ...]] = None
    top_n: int = DEFAULT_TOP_N
    lasso: LassoConfig = field(default_factory=LassoConfig)

    def validate(self) -> None:
        if not self.target_group:
            raise ValueError("target_group must be a non-empty string.")
        if self.top_n < 1:
            raise ValueError("top_n must be at least 1.")
        self.lasso.validate()


@dataclass(frozen=True, eq=False)
class DistinctiveTermsResult:
    tf_idf: List[TfIdfRecord]
    split: DocumentSplit
    training_matrix: SparseMatrix
    path: RegularizationPath
    coefficients: List[RankedCoefficient]
    holdout: Optional[HoldoutReport]
    classifier: LassoLogisticClassifier


def run_distinctive_terms(
    tokens: Iterable[Token],
    documents: Iterable[Document],
    request: DistinctiveTermsRequest,
) -> DistinctiveTermsResult:
    """
    Score tf-idf per group, then find the lemmas that predict ``request.target_group``.
    """
    request.validate()
    token_list = list(tokens)
    source = MappingGroupSource.from_documents(documents)
    groups = set(source.groups.values())
    if request.target_group not in groups:
        raise ValueError(f"Target group '{request.target_group}' does not appear in the documents.")

    tf_idf = score_tf_idf(count_tokens(token_list, source))
    print(f"[tfidf] Scored {len(tf_idf)} terms across {len(groups)} groups")

    split = split_documents(
        sorted(source.groups),
        request.proportion,
        request.seed,
        strata=source.groups if request.stratify else None,
    )
    print(f"[split] {len(split.training)} training / {len(split.test)} test documents")

    training = build_sparse_matrix(token_list, split.training, parts_of_speech=request.parts_of_speech)
    labels = build_labels(training, source, request.target_group)
    print(
        f"[lasso] Fitting {training.shape[0]} documents × {training.shape[1]} lemmas "
        f"({int(labels.sum())} in '{request.target_group}')"
    )
    classifier = LassoLogisticClassifier(request.lasso).fit(training, labels)
    path = cast(RegularizationPath, classifier.path)
    extractor = CoefficientExtractor(path)
    coefficients = extractor.ranked(request.top_n)
    print(f"[lasso] lambda_1se={path.lambda_1se:.6g} keeps {len(extractor.nonzero())} lemmas")

    holdout: Optional[HoldoutReport] = None
    try:
        test = build_sparse_matrix(
            token_list,
            split.test,
            vocabulary=training.vocabulary,
            parts_of_speech=request.parts_of_speech,
        )
    except EmptyVocabularyError:
        print("[lasso] No qualifying tokens in the test documents; skipping hold-out evaluation")
    else:
        holdout = evaluate_holdout(classifier, test, build_labels(test, source, request.target_group))
        print(f"[lasso] Hold-out accuracy={holdout.accuracy:.3f} on {holdout.n_documents} documents")

    return DistinctiveTermsResult(
        tf_idf=tf_idf,
        split=split,
        training_matrix=training,
        path=path,
        coefficients=coefficients,
        holdout=holdout,
        classifier=classifier,
    )


__all__ = ["DistinctiveTermsRequest", "DistinctiveTermsResult", "run_distinctive_terms"]
