"""Stanza-backed dependency annotation producing one row per token."""

from __future__ import annotations

from math import ceil
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pandas as pd
import stanza
from tqdm import tqdm

from src.datahub.helpers import require_columns, to_int

ANNOTATION_COLUMNS: Tuple[str, ...] = ("doc_id", "sentence_id", "sentence", "token_id", "token", "dep_rel")


def ensure_pipeline(
    lang: str = "en",
    use_gpu: Optional[bool] = None,
    *,
    resources_dir: Optional[Path] = None,
    download_models: bool = True,
) -> stanza.Pipeline:
    """
    Download the language model if needed and return a ready dependency-parsing pipeline.

    Stanza caches downloaded models, so invoking download on every run is cheap.
    """
    model_dir = str(resources_dir) if resources_dir is not None else None

    if download_models:
        try:
            stanza.download(lang, model_dir=model_dir, verbose=False)
        except Exception as exc:
            raise RuntimeError(
                "Stanza model download failed. Copy an existing `stanza_resources/` folder to this machine "
                "and rerun with `--no-download-models --resources-dir <path>`."
            ) from exc

    kwargs: Dict[str, Any] = dict(
        lang=lang,
        dir=model_dir,
        processors="tokenize,pos,lemma,depparse",
        tokenize_pretokenized=False,
        verbose=False,
    )
    if use_gpu is not None:
        kwargs["use_gpu"] = use_gpu
    return stanza.Pipeline(**kwargs)


def sample_documents(frame: pd.DataFrame, sample_size: Optional[int], random_seed: Optional[int] = None) -> pd.DataFrame:
    """Return at most ``sample_size`` rows drawn uniformly without replacement, keeping source order."""
    if sample_size is None or sample_size >= len(frame):
        return frame
    if sample_size < 1:
        raise ValueError("sample_size must be at least 1.")
    return frame.sample(n=sample_size, random_state=random_seed).sort_index()


def annotate_documents(
    frame: pd.DataFrame,
    pipeline: Any,
    *,
    batch_size: int = 64,
    desc: str = "Annotating",
) -> pd.DataFrame:
    """Parse ``frame['text']`` and return token rows keyed by ``frame['doc_id']``.

    Args:
        frame: Table with columns ``doc_id`` and ``text``; one row per document.
        pipeline: A ``stanza.Pipeline`` (or anything exposing ``bulk_process``/``__call__``
            that yields objects with ``sentences`` → ``words`` → ``deprel``).
        batch_size: Number of documents handed to the parser at once.

    Returns:
        DataFrame with ``ANNOTATION_COLUMNS``; ``sentence_id`` and ``token_id`` are 1-based.
    """
    require_columns(frame, ("doc_id", "text"), name="annotation input")
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1.")

    doc_ids = [to_int(value) for value in frame["doc_id"].tolist()]
    texts = [str(value) for value in frame["text"].tolist()]

    rows: List[Dict[str, Any]] = []
    total = ceil(len(texts) / batch_size) if texts else 0
    for batch_ids, parsed in tqdm(_iterate_batches(pipeline, doc_ids, texts, batch_size), total=total, desc=desc, leave=False):
        for doc_id, document in zip(batch_ids, parsed):
            rows.extend(_document_rows(doc_id, document))

    return pd.DataFrame(rows, columns=list(ANNOTATION_COLUMNS))


# ---------------------------------------------------------------------------
# Internal helpers


def _iterate_batches(
    pipeline: Any,
    doc_ids: Sequence[int],
    texts: Sequence[str],
    batch_size: int,
) -> Iterator[Tuple[Sequence[int], Sequence[Any]]]:
    for start in range(0, len(texts), batch_size):
        batch_texts = texts[start:start + batch_size]
        batch_ids = doc_ids[start:start + batch_size]
        if hasattr(pipeline, "bulk_process"):
            parsed = pipeline.bulk_process([stanza.Document([], text=text) for text in batch_texts])
        else:
            parsed = [pipeline(text) for text in batch_texts]
        yield batch_ids, parsed


def _document_rows(doc_id: int, document: Any) -> Iterator[Dict[str, Any]]:
    for sentence_idx, sentence in enumerate(document.sentences, start=1):
        sentence_text = sentence.text
        for token_idx, word in enumerate(sentence.words, start=1):
            yield {
                "doc_id": doc_id,
                "sentence_id": sentence_idx,
                "sentence": sentence_text,
                "token_id": token_idx,
                "token": word.text,
                "dep_rel": word.deprel,
            }


__all__ = ["ANNOTATION_COLUMNS", "annotate_documents", "ensure_pipeline", "sample_documents"]
