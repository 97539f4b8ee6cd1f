from __future__ import annotations

from pathlib import Path

import pandas as pd

from .config import CURATED_COLUMNS, DEFAULT_DERIVED_ROOT, DocumentType
from .curate import curated_path
from .helpers import require_columns


def load_curated(
    document_type: DocumentType,
    root: Path = DEFAULT_DERIVED_ROOT,
) -> pd.DataFrame:
    """Read one curated subset table back from ``root``."""
    path = curated_path(root, document_type)
    if not path.exists():
        raise FileNotFoundError(
            f"Missing curated table {path}. Run `python main.py datahub` to build it first."
        )
    frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    require_columns(frame, CURATED_COLUMNS, name=str(path))
    return frame.loc[:, list(CURATED_COLUMNS)]
