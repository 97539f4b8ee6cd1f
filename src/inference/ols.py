"""Ordinary least squares on top of scikit-learn with classical standard errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.linear_model import LinearRegression

from .helpers import ArrayLike, VectorLike, ensure_1d_array, ensure_2d_array


@dataclass(frozen=True)
class ResidualSummary:
    """Residual diagnostics in the layout of a regression summary table."""

    df: int
    std_error: float
    r_squared: float
    minimum: float
    q1: float
    median: float
    q3: float
    maximum: float


class OLSModel:
    """Linear regression with an intercept exposing coefficient standard errors."""

    def __init__(self) -> None:
        self.model: Optional[LinearRegression] = None
        self.std_errors_: Optional[np.ndarray] = None
        self.residuals_: Optional[ResidualSummary] = None

    def fit(self, features: ArrayLike, response: VectorLike) -> "OLSModel":
        X = ensure_2d_array(features)
        y = ensure_1d_array(response)
        if X.shape[0] != y.shape[0]:
            raise ValueError(f"Feature rows ({X.shape[0]}) and response length ({y.shape[0]}) must match")

        self.model = LinearRegression(fit_intercept=True)
        self.model.fit(X, y)

        residuals = y - self.model.predict(X)
        design = np.hstack([np.ones((X.shape[0], 1)), X])
        rank = int(np.linalg.matrix_rank(design))
        df = X.shape[0] - rank
        rss = float(residuals @ residuals)
        sigma2 = rss / df if df > 0 else float("nan")

        # Intercept occupies row/column 0 of the unscaled covariance.
        unscaled = np.linalg.pinv(design.T @ design)
        self.std_errors_ = np.sqrt(np.diag(unscaled)[1:] * sigma2)

        tss = float(((y - y.mean()) ** 2).sum())
        q1, median, q3 = np.percentile(residuals, [25, 50, 75])
        self.residuals_ = ResidualSummary(
            df=df,
            std_error=float(np.sqrt(sigma2)),
            r_squared=1.0 - rss / tss if tss > 0 else float("nan"),
            minimum=float(residuals.min()),
            q1=float(q1),
            median=float(median),
            q3=float(q3),
            maximum=float(residuals.max()),
        )
        return self

    @property
    def coef_(self) -> np.ndarray:
        return self._require_model().coef_

    @property
    def intercept_(self) -> float:
        return float(self._require_model().intercept_)

    def predict(self, features: ArrayLike) -> np.ndarray:
        model = self._require_model()
        return model.predict(ensure_2d_array(features))

    def _require_model(self) -> LinearRegression:
        if self.model is None:
            raise RuntimeError("OLSModel has not been fitted yet.")
        return self.model


def fit_coefficient(features: np.ndarray, response: np.ndarray, column: int = 0) -> float:
    """Refit and return a single slope; used inside resampling loops."""
    model = LinearRegression(fit_intercept=True)
    model.fit(features, response)
    return float(model.coef_[column])


__all__ = ["OLSModel", "ResidualSummary", "fit_coefficient"]
