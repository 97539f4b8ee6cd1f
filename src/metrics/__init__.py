"""Complexity measurements derived from dependency annotations."""

from .complexity import aggregate_sentences, combine_subsets, records_to_table, token_rows_from_frame, transform_corpus
from .errors import AmbiguousSentenceTextError, EmptyPartitionError, InsufficientDataError
from .records import SentenceComplexityRecord, TokenAnnotationRow

__all__ = [
    "AmbiguousSentenceTextError",
    "EmptyPartitionError",
    "InsufficientDataError",
    "SentenceComplexityRecord",
    "TokenAnnotationRow",
    "aggregate_sentences",
    "combine_subsets",
    "records_to_table",
    "token_rows_from_frame",
    "transform_corpus",
]
