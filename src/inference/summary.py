"""Descriptive inspection of the model input before fitting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

import pandas as pd

from .balancing import level_counts


@dataclass(frozen=True)
class DataSummary:
    """Missingness, distribution and class counts of the complexity table."""

    n_rows: int
    missing: Dict[str, int]
    distribution: pd.DataFrame
    level_counts: Dict[str, int]

    @property
    def imbalance_ratio(self) -> float:
        """Majority count over minority count (``inf`` when a level is empty)."""
        counts = list(self.level_counts.values())
        if not counts or min(counts) == 0:
            return float("inf")
        return max(counts) / min(counts)

    def to_frame(self) -> pd.DataFrame:
        rows = [{"statistic": "rows", "value": self.n_rows}]
        rows.extend({"statistic": f"missing[{column}]", "value": count} for column, count in self.missing.items())
        rows.extend({"statistic": f"n[{level}]", "value": count} for level, count in self.level_counts.items())
        rows.append({"statistic": "imbalance_ratio", "value": round(self.imbalance_ratio, 3)})
        return pd.DataFrame(rows, columns=["statistic", "value"])


def inspect_table(
    table: pd.DataFrame,
    levels: Sequence[str],
    columns: Sequence[str] = ("t_units", "word_len", "type"),
) -> DataSummary:
    counts = level_counts(table)
    return DataSummary(
        n_rows=len(table),
        missing={column: int(table[column].isna().sum()) for column in columns},
        distribution=table.loc[:, ["t_units", "word_len"]].describe(),
        level_counts={level: counts.get(level, 0) for level in levels},
    )


__all__ = ["DataSummary", "inspect_table"]
