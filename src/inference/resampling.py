"""Permutation null distributions and bootstrap intervals for the type effect.

Every iteration draws from its own generator spawned from a parent
``SeedSequence``, so iteration ``i`` always sees the same stream for a given
seed regardless of the order iterations are evaluated in.
"""

from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np
from tqdm import tqdm

from .formulas import DesignMatrix
from .ols import fit_coefficient

# Relative tolerance when comparing null statistics to the observed one.
_TIE_TOLERANCE = 1e-12


def iteration_generators(seed_sequence: np.random.SeedSequence, iterations: int) -> Iterator[np.random.Generator]:
    for child in seed_sequence.spawn(iterations):
        yield np.random.default_rng(child)


def permutation_null_distribution(
    design: DesignMatrix,
    iterations: int,
    seed_sequence: np.random.SeedSequence,
    *,
    show_progress: bool = False,
) -> np.ndarray:
    """Refit the model after shuffling the document-type labels ``iterations`` times."""
    indicator = design.indicator
    null = np.empty(iterations, dtype=np.float64)
    generators = iteration_generators(seed_sequence, iterations)
    for idx, rng in enumerate(
        tqdm(generators, total=iterations, desc="Permutations", leave=False, disable=not show_progress)
    ):
        shuffled = rng.permutation(indicator)
        null[idx] = fit_coefficient(design.with_indicator(shuffled), design.response)
    return null


def two_sided_p_value(null_distribution: np.ndarray, observed: float) -> float:
    """Share of null statistics at least as extreme as ``observed`` in absolute value."""
    null = np.asarray(null_distribution, dtype=np.float64)
    if null.size == 0:
        raise ValueError("null_distribution cannot be empty.")
    threshold = abs(observed) * (1.0 - _TIE_TOLERANCE)
    return float(np.mean(np.abs(null) >= threshold))


def bootstrap_distribution(
    design: DesignMatrix,
    iterations: int,
    seed_sequence: np.random.SeedSequence,
    *,
    show_progress: bool = False,
) -> np.ndarray:
    """Stratified bootstrap: coefficient refits on samples drawn with replacement within each document type.

    Each replicate keeps the observed per-level counts, so neither level can vanish from a resample.
    """
    reference_rows = np.flatnonzero(design.indicator == 0)
    comparison_rows = np.flatnonzero(design.indicator == 1)

    draws = np.empty(iterations, dtype=np.float64)
    generators = iteration_generators(seed_sequence, iterations)
    for idx, rng in enumerate(
        tqdm(generators, total=iterations, desc="Bootstrap", leave=False, disable=not show_progress)
    ):
        rows = np.concatenate(
            [
                rng.choice(reference_rows, size=reference_rows.size, replace=True),
                rng.choice(comparison_rows, size=comparison_rows.size, replace=True),
            ]
        )
        draws[idx] = fit_coefficient(design.features[rows], design.response[rows])
    return draws


def percentile_interval(draws: np.ndarray, confidence_level: float) -> Tuple[float, float]:
    """Empirical percentile interval, e.g. 2.5th/97.5th for ``confidence_level=0.95``."""
    if not 0.0 < confidence_level < 1.0:
        raise ValueError("confidence_level must fall within (0, 1).")
    alpha = 1.0 - confidence_level
    lower, upper = np.percentile(draws, [100.0 * alpha / 2.0, 100.0 * (1.0 - alpha / 2.0)])
    return float(lower), float(upper)


__all__ = [
    "bootstrap_distribution",
    "iteration_generators",
    "percentile_interval",
    "permutation_null_distribution",
    "two_sided_p_value",
]
