"""Plotting utilities for experiment results."""

from .complexity_by_type import plot_complexity_by_type
from .null_distribution import plot_null_distribution
from .save_config import FigureTarget, ReportLayout

__all__ = [
    "FigureTarget",
    "ReportLayout",
    "plot_complexity_by_type",
    "plot_null_distribution",
]
