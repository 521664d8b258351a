from pathlib import Path
from typing import List, Optional

import typer

from distinctive.corpus import count_tokens, load_documents, load_tokens
from distinctive.corpus.config import DEFAULT_SEED, DEFAULT_TOP_N, DEFAULT_TRAIN_PROPORTION
from distinctive.errors import DistinctiveTermsError
from distinctive.metrics import rank_terms, score_tf_idf, top_terms_per_group
from distinctive.pipelines import (
    DistinctiveTermsRequest,
    coefficient_frame,
    path_frame,
    ranked_terms_frame,
    run_distinctive_terms,
    top_terms_frame,
)
from distinctive.probes import LassoConfig

app = typer.Typer()


@app.command()
def tfidf(
    tokens: Path = typer.Option(..., "--tokens", exists=True, dir_okay=False, help="CSV of document_id, lemma, part_of_speech."),
    documents: Path = typer.Option(..., "--documents", exists=True, dir_okay=False, help="CSV of document_id, group."),
    group: Optional[str] = typer.Option(None, "--group", help="Rank a single group (requires --pos)."),
    pos: Optional[str] = typer.Option(None, "--pos", help="Part-of-speech filter, e.g. ADJ."),
    top: int = typer.Option(DEFAULT_TOP_N, "--top", min=1, help="Rows to show per group."),
) -> None:
    """
    Print tf-idf tables: dense-ranked terms for one group, or the top terms of every group.
    """
    if group is not None and pos is None:
        raise typer.BadParameter("--group needs --pos to pick the part of speech to rank.")
    try:
        records = score_tf_idf(count_tokens(load_tokens(tokens), load_documents(documents)))
    except (DistinctiveTermsError, ValueError) as exc:
        typer.echo(f"[tfidf] {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if group is not None and pos is not None:
        ranked = rank_terms(records, pos, group)
        frame = ranked_terms_frame(ranked[:top])
    else:
        frame = top_terms_frame(top_terms_per_group(records, top, part_of_speech=pos))
    typer.echo(frame.to_string(index=False))


@app.command()
def lasso(
    tokens: Path = typer.Option(..., "--tokens", exists=True, dir_okay=False, help="CSV of document_id, lemma, part_of_speech."),
    documents: Path = typer.Option(..., "--documents", exists=True, dir_okay=False, help="CSV of document_id, group."),
    target: str = typer.Option(..., "--target", help="Group treated as the positive class."),
    proportion: float = typer.Option(DEFAULT_TRAIN_PROPORTION, "--proportion", help="Share of documents used for training."),
    seed: int = typer.Option(DEFAULT_SEED, "--seed", help="Seed for the split and the fold assignment."),
    stratify: bool = typer.Option(True, "--stratify/--no-stratify", help="Keep group shares equal across the split."),
    pos: List[str] = typer.Option([], "--pos", help="Restrict features to these parts of speech (repeatable)."),
    folds: int = typer.Option(10, "--folds", min=3, help="Cross-validation folds."),
    jobs: Optional[int] = typer.Option(None, "--jobs", help="Parallel workers for the folds (-1 = all cores)."),
    top: int = typer.Option(DEFAULT_TOP_N, "--top", min=1, help="Coefficients to show per sign."),
    show_path: bool = typer.Option(False, "--show-path", help="Also print the cross-validation table per lambda."),
    verbose: bool = typer.Option(False, "--verbose", help="Report per-fold progress."),
) -> None:
    """
    Fit a cross-validated LASSO logistic regression and print the lemmas that predict --target.
    """
    request = DistinctiveTermsRequest(
        target_group=target,
        proportion=proportion,
        seed=seed,
        stratify=stratify,
        parts_of_speech=tuple(pos) or None,
        top_n=top,
        lasso=LassoConfig(n_folds=folds, n_jobs=jobs, random_state=seed, verbose=verbose),
    )
    try:
        result = run_distinctive_terms(load_tokens(tokens), load_documents(documents), request)
    except (DistinctiveTermsError, ValueError) as exc:
        typer.echo(f"[lasso] {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if show_path:
        typer.echo(path_frame(result.path).to_string(index=False))
    typer.echo(coefficient_frame(result.coefficients).to_string(index=False))
    if result.holdout is not None:
        auc = "n/a" if result.holdout.roc_auc is None else f"{result.holdout.roc_auc:.3f}"
        typer.echo(f"[lasso] Hold-out accuracy={result.holdout.accuracy:.3f} roc_auc={auc}")


if __name__ == "__main__":
    app()
