"""Array conversion helpers shared by the model and resampling code."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

ArrayLike = Union[np.ndarray, Sequence[Sequence[float]]]
VectorLike = Union[np.ndarray, Sequence[float]]


def ensure_2d_array(features: ArrayLike, *, name: str = "features") -> np.ndarray:
    """Coerce features into a float64 numpy array of shape (n_samples, n_features)."""
    arr = _as_numpy(features, name=name)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be 2-D (samples × predictors), got shape {arr.shape}")
    return arr.astype(np.float64, copy=False)


def ensure_1d_array(values: VectorLike, *, name: str = "response") -> np.ndarray:
    """Coerce a response vector into a finite 1-D float64 array."""
    arr = _as_numpy(values, name=name)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be 1-D (samples,), got shape {arr.shape}")
    arr = arr.astype(np.float64, copy=False)
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains non-finite entries.")
    return arr


def _as_numpy(value: Union[np.ndarray, Sequence], *, name: str) -> np.ndarray:
    arr = np.asarray(value)
    if arr.size == 0:
        raise ValueError(f"{name} cannot be empty")
    return arr
