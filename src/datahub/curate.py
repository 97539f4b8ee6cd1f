from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import pandas as pd

from .config import (
    ALL_DOCUMENT_TYPES,
    CURATED_COLUMNS,
    DEFAULT_DERIVED_ROOT,
    DEFAULT_RAW_ROOT,
    DERIVED,
    ENNTT,
    DocumentType,
    stem_for,
)
from .dictionary import CURATED_DESCRIPTIONS, write_table
from .helpers import records_to_frame
from .parser import collect_subset_rows


def curated_path(derived_root: Path, document_type: str) -> Path:
    return derived_root / DERIVED["curated_folder"] / f"{stem_for(document_type)}.csv"


def curate_subset(
    document_type: DocumentType,
    *,
    raw_root: Path = DEFAULT_RAW_ROOT,
    derived_root: Path = DEFAULT_DERIVED_ROOT,
) -> pd.DataFrame:
    """Parse one corpus subset into the curated transcript-line table and persist it."""
    corpus_root = raw_root / ENNTT["folder_name"]
    rows = collect_subset_rows(corpus_root, document_type)
    frame = records_to_frame(rows, CURATED_COLUMNS)

    empty_text = frame["text"].str.len() == 0
    if empty_text.any():
        print(f"[datahub] Dropping {int(empty_text.sum())} empty {document_type} lines")
        frame = frame.loc[~empty_text].reset_index(drop=True)

    target = curated_path(derived_root, document_type)
    write_table(frame, target, CURATED_DESCRIPTIONS)
    print(f"[datahub] Saved {document_type} ({len(frame)} lines) → {target}")
    return frame


def _normalize_selection(document_types: Optional[Sequence[str]]) -> Sequence[DocumentType]:
    """Return a deterministic, validated tuple of document types."""
    if not document_types:
        return tuple(ALL_DOCUMENT_TYPES)

    seen: Set[str] = set()
    normalized: List[DocumentType] = []
    for document_type in document_types:
        if document_type not in ALL_DOCUMENT_TYPES:
            raise ValueError(f"Unknown document type '{document_type}'")
        if document_type in seen:
            continue
        normalized.append(document_type)  # type: ignore[arg-type]
        seen.add(document_type)
    return tuple(normalized)


def curate_corpus(
    raw_root: Path = DEFAULT_RAW_ROOT,
    derived_root: Path = DEFAULT_DERIVED_ROOT,
    document_types: Optional[Sequence[str]] = None,
) -> Dict[str, pd.DataFrame]:
    """Curate selected subsets (default: all three) into CSV tables under ``derived_root``."""
    curated: Dict[str, pd.DataFrame] = {}
    for document_type in _normalize_selection(document_types):
        curated[document_type] = curate_subset(document_type, raw_root=raw_root, derived_root=derived_root)
    return curated


if __name__ == "__main__":
    curate_corpus()
