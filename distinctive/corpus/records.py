"""Shared value records for annotated corpora."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Token:
    """Single annotated token produced by an external annotator."""

    document_id: str
    lemma: str
    part_of_speech: str


@dataclass(frozen=True)
class Document:
    """Group assignment for one document."""

    document_id: str
    group: str


@dataclass(frozen=True)
class CountRecord:
    """Number of tokens sharing a (group, lemma, part_of_speech) key."""

    group: str
    lemma: str
    part_of_speech: str
    count: int


@dataclass(frozen=True)
class DocumentSplit:
    """Disjoint training/test partition of document identifiers."""

    training: Tuple[str, ...]
    test: Tuple[str, ...]

    def is_training(self, document_id: str) -> bool:
        return document_id in self.training
