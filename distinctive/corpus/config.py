"""Static defaults shared by the corpus helpers and the Typer CLI."""

from __future__ import annotations

from typing import Tuple

# Defaults used by the Typer CLI; callers may override these.
DEFAULT_SEED = 1234
DEFAULT_TRAIN_PROPORTION = 0.75
DEFAULT_TOP_N = 10

# ---------------------------------------------------------------------------
# Column layouts for tabular token and document inputs.

TOKEN_COLUMNS: Tuple[str, str, str] = ("document_id", "lemma", "part_of_speech")
DOCUMENT_COLUMNS: Tuple[str, str] = ("document_id", "group")


__all__ = [
    "DEFAULT_SEED",
    "DEFAULT_TRAIN_PROPORTION",
    "DEFAULT_TOP_N",
    "TOKEN_COLUMNS",
    "DOCUMENT_COLUMNS",
]
