"""Linear model of syntactic complexity on document type with resampling-based inference."""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from src.datahub.helpers import require_columns
from src.metrics.errors import InsufficientDataError

from .balancing import balance_levels, level_counts
from .config import InferenceConfig
from .formulas import build_design, get_formula
from .ols import OLSModel
from .resampling import (
    bootstrap_distribution,
    percentile_interval,
    permutation_null_distribution,
    two_sided_p_value,
)
from .results import ModelFitResult
from .summary import inspect_table

MIN_OBSERVATIONS_PER_LEVEL = 2


class ComplexityInference:
    """Fits the complexity model for two document types and tests the type effect."""

    def __init__(self, config: Optional[InferenceConfig] = None) -> None:
        self.config = config or InferenceConfig()
        self.config.validate()
        self._result: Optional[ModelFitResult] = None

    def select_levels(self, table: pd.DataFrame) -> pd.DataFrame:
        """Keep rows of the configured levels."""
        require_columns(table, ("type", "t_units", "word_len"), name="complexity table")
        selected = table.loc[table["type"].isin(self.config.levels)]
        dropped = len(table) - len(selected)
        if dropped:
            others = sorted(set(table["type"].astype(str)) - set(self.config.levels))
            print(f"[infer] Excluding {dropped} rows of type(s) {', '.join(others)}")
        return selected

    def drop_incomplete(self, selected: pd.DataFrame) -> pd.DataFrame:
        """Drop rows with a missing ``t_units`` or ``word_len``."""
        complete = selected.dropna(subset=["t_units", "word_len"])
        if len(complete) != len(selected):
            print(f"[infer] Dropping {len(selected) - len(complete)} rows with missing counts")
        return complete

    def fit(self, table: pd.DataFrame) -> "ComplexityInference":
        cfg = self.config
        selected = self.select_levels(table)
        summary = inspect_table(selected, cfg.levels)
        print(f"[infer] Level counts: {summary.level_counts} (imbalance ratio {summary.imbalance_ratio:.2f})")
        selected = self.drop_incomplete(selected)

        # Before balancing, which copies the minority count onto every level.
        self._check_counts(selected)

        balance_seq, permutation_seq, bootstrap_seq = np.random.SeedSequence(cfg.random_seed).spawn(3)

        if cfg.balance_classes:
            selected = balance_levels(selected, np.random.default_rng(balance_seq))
            print(f"[infer] Balanced classes to {len(selected) // 2} observations per level")

        counts = level_counts(selected)
        counts = {level: counts.get(level, 0) for level in cfg.levels}

        formula = get_formula(cfg.complexity_formula)
        design = build_design(selected, formula, cfg.levels)

        model = OLSModel().fit(design.features, design.response)
        estimate = float(model.coef_[0])
        std_errors = model.std_errors_
        residuals = model.residuals_
        if std_errors is None or residuals is None:
            raise RuntimeError("OLSModel did not record standard errors.")
        std_error = float(std_errors[0])
        t_value = estimate / std_error if std_error > 0 else float("nan")

        print(f"[infer] Permutation test ({cfg.permutation_iterations} iterations)")
        null = permutation_null_distribution(
            design, cfg.permutation_iterations, permutation_seq, show_progress=cfg.show_progress
        )
        p_value = two_sided_p_value(null, estimate)

        print(f"[infer] Bootstrap interval ({cfg.bootstrap_iterations} iterations)")
        draws = bootstrap_distribution(design, cfg.bootstrap_iterations, bootstrap_seq, show_progress=cfg.show_progress)
        ci_lower, ci_upper = percentile_interval(draws, cfg.confidence_level)

        self._result = ModelFitResult(
            reference=design.reference,
            comparison=design.comparison,
            formula=formula.name,
            estimate=estimate,
            std_error=std_error,
            t_value=t_value,
            residuals=residuals,
            ci_lower=ci_lower,
            ci_upper=ci_upper,
            confidence_level=cfg.confidence_level,
            statistic=estimate,
            null_distribution=tuple(float(value) for value in np.sort(null)),
            p_value=p_value,
            level_counts=counts,
            balanced=cfg.balance_classes,
            summary=summary,
        )
        return self

    def _check_counts(self, selected: pd.DataFrame) -> None:
        counts = level_counts(selected)
        for level in self.config.levels:
            count = counts.get(level, 0)
            if count < MIN_OBSERVATIONS_PER_LEVEL:
                raise InsufficientDataError(level, count, MIN_OBSERVATIONS_PER_LEVEL)

    def result(self) -> ModelFitResult:
        if self._result is None:
            raise RuntimeError("ComplexityInference.fit() must be called before result().")
        return self._result

    def complexity_by_type(self, table: pd.DataFrame) -> pd.DataFrame:
        """Per-row ``syntactic_complexity`` for the configured levels, for plotting."""
        selected = self.drop_incomplete(self.select_levels(table))
        formula = get_formula(self.config.complexity_formula)
        return pd.DataFrame(
            {
                "type": selected["type"].astype(str).to_numpy(),
                "syntactic_complexity": formula.response(selected),
            }
        )


def run_inference(table: pd.DataFrame, config: Optional[InferenceConfig] = None) -> ModelFitResult:
    """Fit the model and run both resampling procedures in one call."""
    return ComplexityInference(config).fit(table).result()


__all__ = ["ComplexityInference", "MIN_OBSERVATIONS_PER_LEVEL", "run_inference"]
