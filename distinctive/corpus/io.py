"""Load token and document tables from CSV files."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import pandas as pd

from .config import DOCUMENT_COLUMNS, TOKEN_COLUMNS
from .records import Document, Token


def read_table(path: Path, columns: Sequence[str]) -> pd.DataFrame:
    """Read a CSV file and keep only ``columns`` as strings."""
    frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = [column for column in columns if column not in frame.columns]
    if missing:
        raise ValueError(f"{path} is missing required columns: {', '.join(missing)}")
    return frame.loc[:, list(columns)]


def load_tokens(path: Path) -> List[Token]:
    """Load annotated tokens (document_id, lemma, part_of_speech)."""
    frame = read_table(path, TOKEN_COLUMNS)
    return [
        Token(document_id=document_id, lemma=lemma, part_of_speech=part_of_speech)
        for document_id, lemma, part_of_speech in frame.itertuples(index=False, name=None)
    ]


def load_documents(path: Path) -> List[Document]:
    """Load document group assignments (document_id, group)."""
    frame = read_table(path, DOCUMENT_COLUMNS)
    return [Document(document_id=document_id, group=group) for document_id, group in frame.itertuples(index=False, name=None)]


__all__ = ["load_documents", "load_tokens", "read_table"]
