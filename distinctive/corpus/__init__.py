from .counting import count_tokens, group_totals
from .io import load_documents, load_tokens
from .records import CountRecord, Document, DocumentSplit, Token
from .sources import Annotator, GroupSource, MappingGroupSource, annotate_corpus, group_lookup
from .splitting import split_documents, training_size

__all__ = [
    "Annotator",
    "CountRecord",
    "Document",
    "DocumentSplit",
    "GroupSource",
    "MappingGroupSource",
    "Token",
    "annotate_corpus",
    "count_tokens",
    "group_lookup",
    "group_totals",
    "load_documents",
    "load_tokens",
    "split_documents",
    "training_size",
]
