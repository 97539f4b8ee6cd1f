"""Static configuration for corpus download, curation and derived-table paths."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Literal, Tuple, TypedDict

DocumentType = Literal["native", "non-native", "translation"]
ALL_DOCUMENT_TYPES: Tuple[DocumentType, ...] = ("native", "non-native", "translation")


class CorpusConfig(TypedDict):
    folder_name: str
    archive_name: str
    stems: Dict[str, str]


class DerivedConfig(TypedDict):
    curated_folder: str
    annotation_folder: str
    complexity_folder: str
    complexity_file: str


# Default directories used by the Typer CLI; callers may override these.
DEFAULT_RAW_ROOT = Path("data/raw")
DEFAULT_DERIVED_ROOT = Path("data/derived")
DEFAULT_REPORT_ROOT = Path("output")

# ---------------------------------------------------------------------------
# Corpus layout. Each subset ships as ``<stem>.dat`` (one <LINE .../> element per
# transcript line) next to ``<stem>.tok`` (the tokenised text of that line).

ENNTT: CorpusConfig = {
    "folder_name": "enntt",
    "archive_name": "enntt-archive",
    "stems": {
        "native": "natives",
        "non-native": "nonnatives",
        "translation": "translations",
    },
}

DERIVED: DerivedConfig = {
    "curated_folder": "enntt",
    "annotation_folder": "annotations",
    "complexity_folder": "complexity",
    "complexity_file": "sentences.csv",
}

# Attribute names on <LINE/> elements mapped onto curated columns. Later entries
# in each tuple are fallbacks for older releases of the corpus.
LINE_ATTRIBUTES: Dict[str, Tuple[str, ...]] = {
    "session_id": ("SESSION_ID",),
    "speaker_id": ("SPEAKER_ID", "MEPID"),
    "state": ("STATE",),
    "session_seq": ("SEQ_SPEAKER_ID", "SESSION_SEQ"),
}

CURATED_COLUMNS: Tuple[str, ...] = ("session_id", "speaker_id", "state", "session_seq", "text", "type")
COMPLEXITY_COLUMNS: Tuple[str, ...] = ("doc_id", "type", "t_units", "word_len", "text")


def stem_for(document_type: str) -> str:
    """Return the file stem used for ``document_type`` in the corpus and derived folders."""
    try:
        return ENNTT["stems"][document_type]
    except KeyError as exc:
        raise ValueError(f"Unknown document type '{document_type}'. Options: {ALL_DOCUMENT_TYPES}") from exc


__all__ = [
    "ALL_DOCUMENT_TYPES",
    "COMPLEXITY_COLUMNS",
    "CURATED_COLUMNS",
    "CorpusConfig",
    "DEFAULT_DERIVED_ROOT",
    "DEFAULT_RAW_ROOT",
    "DEFAULT_REPORT_ROOT",
    "DERIVED",
    "DerivedConfig",
    "DocumentType",
    "ENNTT",
    "LINE_ATTRIBUTES",
    "stem_for",
]
