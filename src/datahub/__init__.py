from .config import ALL_DOCUMENT_TYPES, DocumentType
from .curate import curate_corpus, curate_subset
from .loader import load_curated
from .pipeline import DataRequest, prepare_corpus

__all__ = [
    "ALL_DOCUMENT_TYPES",
    "DataRequest",
    "DocumentType",
    "curate_corpus",
    "curate_subset",
    "load_curated",
    "prepare_corpus",
]
