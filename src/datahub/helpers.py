from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Sequence

import pandas as pd


def records_to_frame(records: Iterable[Any], columns: Sequence[str]) -> pd.DataFrame:
    """Convert dataclass records into a DataFrame with a fixed column order."""
    rows: List[Dict[str, Any]] = [asdict(record) for record in records]
    if not rows:
        return pd.DataFrame(columns=list(columns))
    return pd.DataFrame(rows, columns=list(columns))


def require_columns(frame: pd.DataFrame, required: Sequence[str], *, name: str = "table") -> None:
    """Raise if ``frame`` lacks any of ``required``."""
    missing = [column for column in required if column not in frame.columns]
    if missing:
        raise ValueError(f"{name} is missing required columns: {', '.join(missing)}")


def to_int(value: Any) -> int:
    """Robustly convert CSV/parser fields to ints."""
    if value is None:
        raise ValueError("Expected integer-like value, received None")
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Cannot convert {value!r} to int") from exc
