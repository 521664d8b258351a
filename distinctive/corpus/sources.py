"""Capability interfaces for the annotator and document-metadata collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Tuple

from .records import Document, Token


class Annotator(Protocol):
    """Produces lemma and part-of-speech annotations for one document."""

    def annotate(self, document_id: str, text: str) -> Iterable[Token]:
        """Return the tokens of ``text``, each tagged with ``document_id``."""
        ...


class GroupSource(Protocol):
    """Provides the group a document belongs to."""

    def group_for(self, document_id: str) -> Optional[str]:
        """Return the group of ``document_id`` or None if it is unknown."""
        ...


@dataclass(frozen=True)
class MappingGroupSource:
    """GroupSource backed by an in-memory document_id → group mapping."""

    groups: Mapping[str, str]

    @classmethod
    def from_documents(cls, documents: Iterable[Document]) -> "MappingGroupSource":
        return cls(group_lookup(documents))

    def group_for(self, document_id: str) -> Optional[str]:
        return self.groups.get(document_id)

    def __iter__(self) -> Iterator[Document]:
        for document_id, group in self.groups.items():
            yield Document(document_id=document_id, group=group)


def group_lookup(documents: Iterable[Document]) -> Dict[str, str]:
    """Build a document_id → group mapping, rejecting conflicting assignments."""
    lookup: Dict[str, str] = {}
    for document in documents:
        existing = lookup.get(document.document_id)
        if existing is not None and existing != document.group:
            raise ValueError(
                f"Document '{document.document_id}' is assigned to both '{existing}' and '{document.group}'."
            )
        lookup[document.document_id] = document.group
    return lookup


def annotate_corpus(texts: Iterable[Tuple[str, str]], annotator: Annotator) -> List[Token]:
    """Run ``annotator`` over (document_id, text) pairs and collect its tokens."""
    tokens: List[Token] = []
    for document_id, text in texts:
        for token in annotator.annotate(document_id, text):
            if token.document_id != document_id:
                raise ValueError(
                    f"Annotator returned a token for '{token.document_id}' while annotating '{document_id}'."
                )
            tokens.append(token)
    return tokens


__all__ = [
    "Annotator",
    "GroupSource",
    "MappingGroupSource",
    "annotate_corpus",
    "group_lookup",
]
