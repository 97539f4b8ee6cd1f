"""Dependency annotation of curated transcript lines."""

from .stanza_annotator import ANNOTATION_COLUMNS, annotate_documents, ensure_pipeline, sample_documents

__all__ = [
    "ANNOTATION_COLUMNS",
    "annotate_documents",
    "ensure_pipeline",
    "sample_documents",
]
