"""Tests for token counting, annotation helpers, splitting and CSV loading."""

from __future__ import annotations

from pathlib import Path
import pickle
import sys
from typing import Iterable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from distinctive.corpus.counting import count_tokens, group_totals
from distinctive.corpus.io import load_documents, load_tokens
from distinctive.corpus.records import CountRecord, Document, Token
from distinctive.corpus.sources import MappingGroupSource, annotate_corpus, group_lookup
from distinctive.corpus.splitting import split_documents, training_size
from distinctive.errors import InvalidProportionError, UnmappedDocumentError


def _documents() -> list[Document]:
    return [
        Document("gen-1", "genesis"),
        Document("gen-2", "genesis"),
        Document("exo-1", "exodus"),
    ]


def _tokens() -> list[Token]:
    return [
        Token("gen-1", "create", "VERB"),
        Token("gen-1", "light", "NOUN"),
        Token("gen-1", "light", "NOUN"),
        Token("gen-2", "light", "NOUN"),
        Token("gen-2", "light", "ADJ"),
        Token("exo-1", "plague", "NOUN"),
        Token("exo-1", "light", "NOUN"),
    ]


# ---------------------------------------------------------------------------
# Counting


def test_count_tokens_aggregates_per_group_lemma_and_pos() -> None:
    counts = {(r.group, r.lemma, r.part_of_speech): r.count for r in count_tokens(_tokens(), _documents())}
    assert counts == {
        ("genesis", "create", "VERB"): 1,
        ("genesis", "light", "NOUN"): 3,
        ("genesis", "light", "ADJ"): 1,
        ("exodus", "plague", "NOUN"): 1,
        ("exodus", "light", "NOUN"): 1,
    }


def test_group_totals_match_observed_tokens() -> None:
    counts = count_tokens(_tokens(), _documents())
    assert group_totals(counts) == {"genesis": 5, "exodus": 2}


def test_count_tokens_accepts_group_source() -> None:
    source = MappingGroupSource({"gen-1": "genesis"})
    counts = count_tokens([Token("gen-1", "day", "NOUN")], source)
    assert counts == [CountRecord(group="genesis", lemma="day", part_of_speech="NOUN", count=1)]


def test_count_tokens_rejects_unmapped_document() -> None:
    tokens = _tokens() + [Token("lev-1", "offering", "NOUN")]
    with pytest.raises(UnmappedDocumentError) as excinfo:
        count_tokens(tokens, _documents())
    assert excinfo.value.document_id == "lev-1"


def test_unmapped_document_error_survives_pickling() -> None:
    error = pickle.loads(pickle.dumps(UnmappedDocumentError("lev-1")))
    assert error.document_id == "lev-1"
    assert str(error) == "Document 'lev-1' has no group assignment."


def test_count_tokens_empty_input() -> None:
    assert count_tokens([], _documents()) == []


# ---------------------------------------------------------------------------
# Sources


def test_group_lookup_rejects_conflicting_groups() -> None:
    with pytest.raises(ValueError):
        group_lookup([Document("a", "x"), Document("a", "y")])


def test_group_lookup_tolerates_repeated_identical_rows() -> None:
    assert group_lookup([Document("a", "x"), Document("a", "x")]) == {"a": "x"}


def test_mapping_group_source_round_trips_documents() -> None:
    source = MappingGroupSource.from_documents(_documents())
    assert source.group_for("exo-1") == "exodus"
    assert source.group_for("missing") is None
    assert list(source) == _documents()


class WhitespaceAnnotator:
    """Annotator stub that lower-cases whitespace tokens and tags them all as NOUN."""

    def __init__(self, leak_id: str | None = None) -> None:
        self.leak_id = leak_id

    def annotate(self, document_id: str, text: str) -> Iterable[Token]:
        for word in text.split():
            yield Token(self.leak_id or document_id, word.lower(), "NOUN")


def test_annotate_corpus_collects_tokens() -> None:
    tokens = annotate_corpus([("d1", "In the Beginning"), ("d2", "Light")], WhitespaceAnnotator())
    assert [t.lemma for t in tokens] == ["in", "the", "beginning", "light"]
    assert {t.document_id for t in tokens} == {"d1", "d2"}


def test_annotate_corpus_rejects_foreign_document_ids() -> None:
    with pytest.raises(ValueError):
        annotate_corpus([("d1", "word")], WhitespaceAnnotator(leak_id="other"))


# ---------------------------------------------------------------------------
# Splitting


def test_training_size_floors_with_float_guard() -> None:
    assert training_size(100, 0.75) == 75
    assert training_size(100, 0.29) == 29
    assert training_size(10, 0.75) == 7
    assert training_size(3, 0.5) == 1


def test_split_documents_hundred_at_three_quarters() -> None:
    ids = [f"doc-{idx:03d}" for idx in range(100)]
    split = split_documents(ids, 0.75, seed=1234)
    assert len(split.training) == 75
    assert len(split.test) == 25
    assert set(split.training).isdisjoint(split.test)
    assert set(split.training) | set(split.test) == set(ids)


def test_split_documents_is_reproducible() -> None:
    ids = [f"doc-{idx}" for idx in range(37)]
    first = split_documents(ids, 0.6, seed=7)
    second = split_documents(ids, 0.6, seed=7)
    assert first == second
    assert first.is_training(first.training[0])
    assert not first.is_training(first.test[0])


def test_split_documents_seed_changes_partition() -> None:
    ids = [f"doc-{idx}" for idx in range(50)]
    assert split_documents(ids, 0.5, seed=1).training != split_documents(ids, 0.5, seed=2).training


def test_split_documents_stratified_keeps_group_shares() -> None:
    ids = [f"a-{idx}" for idx in range(20)] + [f"b-{idx}" for idx in range(20)]
    strata = {doc: doc[0] for doc in ids}
    split = split_documents(ids, 0.75, seed=3, strata=strata)
    assert sum(doc.startswith("a") for doc in split.training) == 15
    assert sum(doc.startswith("b") for doc in split.training) == 15


def test_split_documents_singleton_group_falls_back_to_unstratified(capsys: pytest.CaptureFixture[str]) -> None:
    ids = [f"a-{idx}" for idx in range(20)] + ["b-0"]
    strata = {doc: doc[0] for doc in ids}
    split = split_documents(ids, 0.75, seed=1, strata=strata)
    assert len(split.training) == 15
    assert len(split.test) == 6
    assert set(split.training) | set(split.test) == set(ids)
    assert "unstratified" in capsys.readouterr().out


def test_split_documents_more_groups_than_test_slots() -> None:
    ids = [f"{group}-{idx}" for group in "abcdefgh" for idx in range(2)]
    strata = {doc: doc[0] for doc in ids}
    split = split_documents(ids, 0.75, seed=5, strata=strata)
    assert len(split.training) == 12
    assert not set(split.training) & set(split.test)


@pytest.mark.parametrize("proportion", [0.0, 1.0, -0.2, 1.5])
def test_split_documents_rejects_bad_proportion(proportion: float) -> None:
    with pytest.raises(InvalidProportionError):
        split_documents(["a", "b", "c"], proportion, seed=0)


def test_split_documents_rejects_empty_input() -> None:
    with pytest.raises(InvalidProportionError):
        split_documents([], 0.5, seed=0)


def test_split_documents_rejects_empty_side() -> None:
    with pytest.raises(InvalidProportionError):
        split_documents(["only"], 0.75, seed=0)


def test_split_documents_rejects_duplicates() -> None:
    with pytest.raises(ValueError):
        split_documents(["a", "a", "b"], 0.5, seed=0)


def test_split_documents_requires_strata_for_every_document() -> None:
    with pytest.raises(ValueError):
        split_documents(["a", "b", "c", "d"], 0.5, seed=0, strata={"a": "x"})


# ---------------------------------------------------------------------------
# CSV loading


def test_load_tokens_and_documents(tmp_path: Path) -> None:
    tokens_csv = tmp_path / "tokens.csv"
    tokens_csv.write_text("document_id,lemma,part_of_speech,extra\nd1,smite,VERB,x\nd1,NA,NOUN,y\n")
    documents_csv = tmp_path / "documents.csv"
    documents_csv.write_text("document_id,group\nd1,exodus\n")

    assert load_tokens(tokens_csv) == [Token("d1", "smite", "VERB"), Token("d1", "NA", "NOUN")]
    assert load_documents(documents_csv) == [Document("d1", "exodus")]


def test_load_tokens_requires_columns(tmp_path: Path) -> None:
    path = tmp_path / "tokens.csv"
    path.write_text("document_id,lemma\nd1,smite\n")
    with pytest.raises(ValueError):
        load_tokens(path)
