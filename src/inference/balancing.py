"""Class balancing by downsampling the majority document type."""

from __future__ import annotations

from typing import Dict

import numpy as np
import pandas as pd


def level_counts(table: pd.DataFrame, column: str = "type") -> Dict[str, int]:
    return {str(level): int(count) for level, count in table[column].value_counts(sort=False).items()}


def balance_levels(table: pd.DataFrame, rng: np.random.Generator, column: str = "type") -> pd.DataFrame:
    """Downsample every level to the minority count, uniformly and without replacement.

    Row order of the kept observations follows ``table``.
    """
    counts = level_counts(table, column)
    if not counts:
        return table
    target = min(counts.values())

    keep = []
    for level in sorted(counts):
        positions = np.flatnonzero((table[column] == level).to_numpy())
        if positions.size > target:
            positions = rng.choice(positions, size=target, replace=False)
        keep.append(positions)

    selected = np.sort(np.concatenate(keep))
    return table.iloc[selected]


__all__ = ["balance_levels", "level_counts"]
