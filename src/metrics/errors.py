"""Typed failures raised by the complexity aggregation and inference stages."""

from __future__ import annotations

from typing import Hashable, Sequence


class AmbiguousSentenceTextError(ValueError):
    """A (doc_id, sentence_id) partition carries more than one sentence text."""

    def __init__(self, key: Hashable, texts: Sequence[str]) -> None:
        self.key = key
        self.texts = tuple(texts)
        preview = " | ".join(repr(text[:60]) for text in self.texts[:3])
        super().__init__(f"Sentence {key} maps to {len(self.texts)} distinct texts: {preview}")


class EmptyPartitionError(ValueError):
    """A grouping key yielded no rows."""

    def __init__(self, key: Hashable) -> None:
        self.key = key
        super().__init__(f"Partition {key} contains no token rows.")


class InsufficientDataError(ValueError):
    """A document-type level has too few observations to fit or resample."""

    def __init__(self, level: str, count: int, minimum: int = 2) -> None:
        self.level = level
        self.count = count
        self.minimum = minimum
        super().__init__(
            f"Document type '{level}' has {count} observation(s); at least {minimum} are required."
        )


__all__ = ["AmbiguousSentenceTextError", "EmptyPartitionError", "InsufficientDataError"]
