"""Run-level configuration for the inference stage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

ComplexityFormulaName = Literal["ratio", "raw_with_covariate"]
COMPLEXITY_FORMULAS: Tuple[ComplexityFormulaName, ...] = ("ratio", "raw_with_covariate")


@dataclass
class InferenceConfig:
    """Options controlling the model formula and resampling.

    ``levels`` names the two document types under comparison; the first one is the
    reference level of the regression, so the reported effect is ``levels[1]`` minus
    ``levels[0]``. Rows of any other type are dropped before fitting.
    """

    balance_classes: bool = False
    complexity_formula: ComplexityFormulaName = "ratio"
    permutation_iterations: int = 1000
    bootstrap_iterations: int = 1000
    confidence_level: float = 0.95
    random_seed: Optional[int] = None
    levels: Tuple[str, str] = ("native", "translation")
    show_progress: bool = True

    def validate(self) -> None:
        if self.complexity_formula not in COMPLEXITY_FORMULAS:
            raise ValueError(
                f"Unknown complexity formula '{self.complexity_formula}'. Options: {', '.join(COMPLEXITY_FORMULAS)}"
            )
        if self.permutation_iterations < 1:
            raise ValueError("permutation_iterations must be at least 1.")
        if self.bootstrap_iterations < 1:
            raise ValueError("bootstrap_iterations must be at least 1.")
        if not 0.0 < self.confidence_level < 1.0:
            raise ValueError("confidence_level must fall within (0, 1).")
        if self.random_seed is not None and self.random_seed < 0:
            raise ValueError("random_seed must be non-negative.")
        if len(self.levels) != 2 or self.levels[0] == self.levels[1]:
            raise ValueError("levels must name two distinct document types.")


__all__ = ["COMPLEXITY_FORMULAS", "ComplexityFormulaName", "InferenceConfig"]
