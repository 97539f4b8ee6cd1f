"""Shared data records for complexity aggregation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenAnnotationRow:
    """Single parsed token."""

    doc_id: int
    sentence_id: int
    dependency_relation: str
    sentence_text: str


@dataclass(frozen=True)
class SentenceComplexityRecord:
    """Clause and length counts for one sentence."""

    doc_id: int
    sentence_id: int
    document_type: str
    t_units: int
    word_len: int
    text: str
