"""High-level orchestration for acquiring and curating the corpus."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import pandas as pd

from .config import ALL_DOCUMENT_TYPES
from .curate import curate_corpus
from .download import download_corpus


@dataclass(frozen=True)
class DataRequest:
    """Describe where the corpus comes from and which subsets to curate."""

    url: Optional[str]
    document_types: Tuple[str, ...] = ALL_DOCUMENT_TYPES

    @classmethod
    def from_flags(cls, url: Optional[str], subsets: Sequence[str]) -> "DataRequest":
        """Translate CLI flags into a normalized request."""
        selected = tuple(subsets) if subsets else ALL_DOCUMENT_TYPES
        unknown = [subset for subset in selected if subset not in ALL_DOCUMENT_TYPES]
        if unknown:
            raise ValueError(f"Unknown subset(s) {', '.join(unknown)}. Options: {', '.join(ALL_DOCUMENT_TYPES)}")
        return cls(url=url, document_types=selected)


def prepare_corpus(
    request: DataRequest,
    raw_root: Path,
    derived_root: Path,
    force: bool = False,
) -> Dict[str, pd.DataFrame]:
    """
    Run the acquisition stage: download the archive when a URL is given, then curate every requested subset.
    """
    raw_root.mkdir(parents=True, exist_ok=True)
    derived_root.mkdir(parents=True, exist_ok=True)

    if request.url:
        download_corpus(raw_root, request.url, force=force)
    else:
        print(f"[datahub] No URL given; curating the corpus already present under {raw_root}")

    return curate_corpus(raw_root=raw_root, derived_root=derived_root, document_types=request.document_types)


__all__ = ["DataRequest", "prepare_corpus"]
