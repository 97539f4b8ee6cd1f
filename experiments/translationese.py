from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import pandas as pd

from src.annotation import annotate_documents, sample_documents
from src.datahub import ALL_DOCUMENT_TYPES, load_curated
from src.datahub.config import COMPLEXITY_COLUMNS, DEFAULT_DERIVED_ROOT, DERIVED, stem_for
from src.datahub.dictionary import ANNOTATION_DESCRIPTIONS, COMPLEXITY_DESCRIPTIONS, write_table
from src.datahub.helpers import require_columns
from src.inference import InferenceConfig, ModelFitResult, run_inference
from src.metrics import transform_corpus


def annotation_path(derived_root: Path, document_type: str) -> Path:
    return derived_root / DERIVED["annotation_folder"] / f"{stem_for(document_type)}.csv"


def complexity_path(derived_root: Path) -> Path:
    return derived_root / DERIVED["complexity_folder"] / DERIVED["complexity_file"]


def annotate_corpus(
    pipeline: Any,
    *,
    derived_root: Path = DEFAULT_DERIVED_ROOT,
    document_types: Sequence[str] = ALL_DOCUMENT_TYPES,
    sample_size: Optional[int] = None,
    random_seed: Optional[int] = None,
    batch_size: int = 64,
) -> Dict[str, pd.DataFrame]:
    """Parse each curated subset and persist its token table."""
    annotated: Dict[str, pd.DataFrame] = {}
    for document_type in document_types:
        curated = load_curated(document_type, root=derived_root)  # type: ignore[arg-type]
        documents = pd.DataFrame({"doc_id": range(1, len(curated) + 1), "text": curated["text"]})
        documents = sample_documents(documents, sample_size, random_seed)
        print(f"[annotate] Parsing {len(documents)} {document_type} documents")

        tokens = annotate_documents(documents, pipeline, batch_size=batch_size, desc=f"Annotating ({document_type})")
        target = annotation_path(derived_root, document_type)
        write_table(tokens, target, ANNOTATION_DESCRIPTIONS)
        print(f"[annotate] Saved {len(tokens)} tokens → {target}")
        annotated[document_type] = tokens
    return annotated


def load_annotations(derived_root: Path, document_type: str) -> pd.DataFrame:
    path = annotation_path(derived_root, document_type)
    if not path.exists():
        raise FileNotFoundError(f"Missing annotation table {path}. Run `python main.py annotate` first.")
    return pd.read_csv(path, keep_default_na=False, dtype={"sentence": str, "token": str, "dep_rel": str})


def transform_annotations(
    *,
    derived_root: Path = DEFAULT_DERIVED_ROOT,
    document_types: Sequence[str] = ALL_DOCUMENT_TYPES,
) -> pd.DataFrame:
    """Aggregate the persisted token tables into the sentence complexity table."""
    token_tables = {document_type: load_annotations(derived_root, document_type) for document_type in document_types}
    table = transform_corpus(token_tables)
    target = complexity_path(derived_root)
    write_table(table, target, COMPLEXITY_DESCRIPTIONS)
    print(f"[transform] Saved {len(table)} sentences → {target}")
    return table


def load_complexity_table(derived_root: Path = DEFAULT_DERIVED_ROOT) -> pd.DataFrame:
    path = complexity_path(derived_root)
    if not path.exists():
        raise FileNotFoundError(f"Missing complexity table {path}. Run `python main.py transform` first.")
    table = pd.read_csv(path, keep_default_na=False, dtype={"type": str, "text": str})
    require_columns(table, COMPLEXITY_COLUMNS, name=str(path))
    return table


def run_translationese(
    pipeline: Any,
    config: InferenceConfig,
    *,
    derived_root: Path = DEFAULT_DERIVED_ROOT,
    document_types: Sequence[str] = ALL_DOCUMENT_TYPES,
    sample_size: Optional[int] = None,
    batch_size: int = 64,
) -> tuple[pd.DataFrame, ModelFitResult]:
    """Annotate, transform and model the curated corpus; returns the complexity table and the fit."""
    print("[run] Starting annotate → transform → infer.")
    annotate_corpus(
        pipeline,
        derived_root=derived_root,
        document_types=document_types,
        sample_size=sample_size,
        random_seed=config.random_seed,
        batch_size=batch_size,
    )
    table = transform_annotations(derived_root=derived_root, document_types=document_types)
    result = run_inference(table, config)
    print(f"[run] Finished: estimate={result.estimate:.4f}, p={result.p_value:.4f}")
    return table, result
