"""Tabular rendering of the inference results."""

from __future__ import annotations

from typing import Optional

import pandas as pd

from experiments.plots.save_config import ReportLayout
from src.inference import ModelFitResult


def render_result(result: ModelFitResult, layout: Optional[ReportLayout] = None) -> pd.DataFrame:
    """Print the summary and fit tables; write them as CSV into the run folder of ``layout``."""
    summary = result.summary.to_frame()
    fit = result.to_frame()

    print("[report] Input summary")
    print(summary.to_string(index=False))
    print(result.summary.distribution.round(3).to_string())
    print("[report] Model fit")
    print(fit.to_string(index=False))

    if layout is not None:
        layout.run_dir.mkdir(parents=True, exist_ok=True)
        summary.to_csv(layout.table("input_summary"), index=False)
        fit.to_csv(layout.table("model_fit"), index=False)
        pd.DataFrame({"statistic": result.null_array}).to_csv(layout.table("null_distribution"), index=False)
        print(f"[report] Tables written to {layout.run_dir}")
    return fit


__all__ = ["render_result"]
