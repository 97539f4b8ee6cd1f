"""Sentence-level syntactic complexity derived from dependency annotations.

Each sentence is reduced to two counts:

* ``t_units``: main clauses (``root``, ``cop``) plus subordinate clauses
  (``ccomp``, ``xcomp``, ``acl:relcl``).
* ``word_len``: number of tokens in the sentence.

The same aggregation is mapped over every corpus subset and the per-subset
outputs are concatenated with freshly assigned, globally unique ``doc_id``s.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Hashable, Iterable, List, Mapping, Sequence, Tuple

import pandas as pd

from src.datahub.config import COMPLEXITY_COLUMNS
from src.datahub.helpers import require_columns, to_int
from src.pipelines import build_partition_plan

from .errors import AmbiguousSentenceTextError, EmptyPartitionError
from .records import SentenceComplexityRecord, TokenAnnotationRow

# Labels are compared lower-cased: spaCy-style parsers emit ``ROOT`` while UD parsers emit ``root``.
MAIN_CLAUSE_RELATIONS = frozenset({"root", "cop"})
SUBORDINATE_CLAUSE_RELATIONS = frozenset({"ccomp", "xcomp", "acl:relcl"})

SentenceKey = Tuple[int, int]


def token_rows_from_frame(frame: pd.DataFrame) -> List[TokenAnnotationRow]:
    """Convert an annotation table (``doc_id``, ``sentence_id``, ``sentence``, ``dep_rel``) into token rows."""
    require_columns(frame, ("doc_id", "sentence_id", "sentence", "dep_rel"), name="annotation table")
    return [
        TokenAnnotationRow(
            doc_id=to_int(doc_id),
            sentence_id=to_int(sentence_id),
            dependency_relation="" if pd.isna(dep_rel) else str(dep_rel),
            sentence_text="" if pd.isna(sentence) else str(sentence),
        )
        for doc_id, sentence_id, sentence, dep_rel in zip(
            frame["doc_id"], frame["sentence_id"], frame["sentence"], frame["dep_rel"]
        )
    ]


def count_clauses(relations: Iterable[str]) -> Tuple[int, int]:
    """Return ``(main_clauses, subordinate_clauses)`` for a sentence's relation labels."""
    main = 0
    subordinate = 0
    for relation in relations:
        label = relation.strip().lower()
        if label in MAIN_CLAUSE_RELATIONS:
            main += 1
        elif label in SUBORDINATE_CLAUSE_RELATIONS:
            subordinate += 1
    return main, subordinate


def summarize_sentence(
    key: Hashable,
    rows: Sequence[TokenAnnotationRow],
    document_type: str,
) -> SentenceComplexityRecord:
    """Reduce the token rows of one sentence to a complexity record."""
    if not rows:
        raise EmptyPartitionError(key)

    texts = list(dict.fromkeys(row.sentence_text for row in rows))
    if len(texts) != 1:
        raise AmbiguousSentenceTextError(key, texts)

    main, subordinate = count_clauses(row.dependency_relation for row in rows)
    return SentenceComplexityRecord(
        doc_id=rows[0].doc_id,
        sentence_id=rows[0].sentence_id,
        document_type=document_type,
        t_units=main + subordinate,
        word_len=len(rows),
        text=texts[0],
    )


def aggregate_sentences(
    rows: Iterable[TokenAnnotationRow],
    document_type: str,
) -> List[SentenceComplexityRecord]:
    """Emit one complexity record per distinct ``(doc_id, sentence_id)`` in ``rows``."""
    plan = build_partition_plan(rows, key_fn=lambda row: (row.doc_id, row.sentence_id))
    return [summarize_sentence(key, plan.partitions[key], document_type) for key in plan.keys]


def combine_subsets(subsets: Iterable[Sequence[SentenceComplexityRecord]]) -> List[SentenceComplexityRecord]:
    """Concatenate per-subset records and renumber ``doc_id`` densely from 1."""
    combined: List[SentenceComplexityRecord] = []
    for records in subsets:
        combined.extend(records)
    return [replace(record, doc_id=new_id) for new_id, record in enumerate(combined, start=1)]


def records_to_table(records: Sequence[SentenceComplexityRecord]) -> pd.DataFrame:
    """Persistable view of the records (``doc_id``, ``type``, ``t_units``, ``word_len``, ``text``)."""
    frame = pd.DataFrame(
        {
            "doc_id": [record.doc_id for record in records],
            "type": [record.document_type for record in records],
            "t_units": [record.t_units for record in records],
            "word_len": [record.word_len for record in records],
            "text": [record.text for record in records],
        },
        columns=list(COMPLEXITY_COLUMNS),
    )
    return frame.astype({"doc_id": "int64", "t_units": "int64", "word_len": "int64"})


def transform_corpus(token_tables: Mapping[str, pd.DataFrame]) -> pd.DataFrame:
    """Aggregate every subset's annotation table and return the combined complexity table.

    Args:
        token_tables: Mapping of document type (``native``, ``non-native``, ``translation``)
            to its annotation table. Iteration order decides the order of the output rows.

    Returns:
        DataFrame with one row per sentence and columns ``COMPLEXITY_COLUMNS``.
    """
    per_subset: List[List[SentenceComplexityRecord]] = []
    for document_type, frame in token_tables.items():
        records = aggregate_sentences(token_rows_from_frame(frame), document_type)
        print(f"[transform] {document_type}: {len(frame)} tokens → {len(records)} sentences")
        per_subset.append(records)

    combined = combine_subsets(per_subset)
    return records_to_table(combined)


__all__ = [
    "MAIN_CLAUSE_RELATIONS",
    "SUBORDINATE_CLAUSE_RELATIONS",
    "aggregate_sentences",
    "combine_subsets",
    "count_clauses",
    "records_to_table",
    "summarize_sentence",
    "token_rows_from_frame",
    "transform_corpus",
]
