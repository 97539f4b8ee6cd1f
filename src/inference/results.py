"""Result records produced by the inference stage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np
import pandas as pd

from .ols import ResidualSummary
from .summary import DataSummary


@dataclass(frozen=True)
class ModelFitResult:
    """Point estimate, interval and permutation test for the document-type effect."""

    reference: str
    comparison: str
    formula: str
    estimate: float
    std_error: float
    t_value: float
    residuals: ResidualSummary
    ci_lower: float
    ci_upper: float
    confidence_level: float
    statistic: float
    null_distribution: Tuple[float, ...]
    p_value: float
    level_counts: Dict[str, int]
    balanced: bool
    summary: DataSummary

    @property
    def term(self) -> str:
        """Regression term name of the effect, e.g. ``type[translation]``."""
        return f"type[{self.comparison}]"

    @property
    def null_array(self) -> np.ndarray:
        return np.asarray(self.null_distribution, dtype=np.float64)

    def to_frame(self) -> pd.DataFrame:
        """Two-column table (``statistic``, ``value``) for rendering and CSV export."""
        ci_label = f"{self.confidence_level:.0%}"
        rows = [
            ("term", self.term),
            ("reference", self.reference),
            ("formula", self.formula),
            ("estimate", self.estimate),
            ("std_error", self.std_error),
            ("t_value", self.t_value),
            (f"ci_lower ({ci_label})", self.ci_lower),
            (f"ci_upper ({ci_label})", self.ci_upper),
            ("p_value (permutation)", self.p_value),
            ("permutations", len(self.null_distribution)),
            ("residual_std_error", self.residuals.std_error),
            ("residual_df", self.residuals.df),
            ("r_squared", self.residuals.r_squared),
            ("balanced", self.balanced),
        ]
        rows.extend((f"n[{level}]", count) for level, count in self.level_counts.items())
        return pd.DataFrame(rows, columns=["statistic", "value"])


__all__ = ["ModelFitResult"]
