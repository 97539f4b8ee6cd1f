"""Response/covariate definitions for the syntactic-complexity model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Protocol, Tuple

import numpy as np
import pandas as pd


class ComplexityFormula(Protocol):
    """Strategy object turning ``t_units``/``word_len`` into a response and covariates."""

    name: str

    def response(self, table: pd.DataFrame) -> np.ndarray:
        """Return the ``syntactic_complexity`` values, one per row."""
        ...

    def covariates(self, table: pd.DataFrame) -> np.ndarray:
        """Return extra predictors (shape ``(n_rows, k)``, ``k`` may be 0)."""
        ...


def _positive_lengths(table: pd.DataFrame) -> np.ndarray:
    word_len = table["word_len"].to_numpy(dtype=np.float64)
    if np.any(word_len <= 0):
        raise ValueError("word_len must be positive for every sentence.")
    return word_len


@dataclass(frozen=True)
class RatioFormula:
    """Complexity as T-units per token; length is absorbed by the ratio."""

    name: str = "ratio"

    def response(self, table: pd.DataFrame) -> np.ndarray:
        return table["t_units"].to_numpy(dtype=np.float64) / _positive_lengths(table)

    def covariates(self, table: pd.DataFrame) -> np.ndarray:
        return np.empty((len(table), 0), dtype=np.float64)


@dataclass(frozen=True)
class RawWithCovariateFormula:
    """Complexity as the raw T-unit count with sentence length as a covariate."""

    name: str = "raw_with_covariate"

    def response(self, table: pd.DataFrame) -> np.ndarray:
        return table["t_units"].to_numpy(dtype=np.float64)

    def covariates(self, table: pd.DataFrame) -> np.ndarray:
        return _positive_lengths(table).reshape(-1, 1)


FORMULAS: Dict[str, ComplexityFormula] = {
    "ratio": RatioFormula(),
    "raw_with_covariate": RawWithCovariateFormula(),
}


def get_formula(name: str) -> ComplexityFormula:
    try:
        return FORMULAS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown complexity formula '{name}'. Available: {list(FORMULAS)}") from exc


@dataclass(frozen=True)
class DesignMatrix:
    """Response and predictors; column 0 of ``features`` is the document-type indicator."""

    response: np.ndarray
    features: np.ndarray
    reference: str
    comparison: str

    @property
    def indicator(self) -> np.ndarray:
        return self.features[:, 0]

    def with_indicator(self, indicator: np.ndarray) -> np.ndarray:
        features = self.features.copy()
        features[:, 0] = indicator
        return features


def build_design(
    table: pd.DataFrame,
    formula: ComplexityFormula,
    levels: Tuple[str, str],
) -> DesignMatrix:
    """Encode ``table['type']`` as 0 (reference) / 1 (comparison) and stack the formula's covariates."""
    reference, comparison = levels
    types = table["type"].astype(str)
    unexpected = sorted(set(types) - {reference, comparison})
    if unexpected:
        raise ValueError(f"Unexpected document types in model input: {', '.join(unexpected)}")

    indicator = (types == comparison).to_numpy(dtype=np.float64).reshape(-1, 1)
    features = np.hstack([indicator, formula.covariates(table)])
    return DesignMatrix(
        response=formula.response(table),
        features=features,
        reference=reference,
        comparison=comparison,
    )


__all__ = [
    "ComplexityFormula",
    "DesignMatrix",
    "FORMULAS",
    "RatioFormula",
    "RawWithCovariateFormula",
    "build_design",
    "get_formula",
]
