"""Histogram of the permutation null distribution with the observed effect marked."""

from __future__ import annotations

from typing import Optional

import pandas as pd
import plotly.express as px

from src.inference import ModelFitResult
from .save_config import FigureTarget, show_or_save


def plot_null_distribution(
    result: ModelFitResult,
    save_to: Optional[FigureTarget] = None,
    bins: int = 50,
) -> None:
    if not result.null_distribution:
        return

    df = pd.DataFrame({"statistic": result.null_array})
    fig = px.histogram(
        df,
        x="statistic",
        nbins=bins,
        title=f"Permutation null distribution of {result.term} (p = {result.p_value:.4f})",
        labels={"statistic": "Coefficient under shuffled labels"},
    )
    # Both tails count towards the two-sided p-value.
    for value in (result.statistic, -result.statistic):
        fig.add_vline(x=value, line_dash="dash", line_color="firebrick")
    fig.add_vrect(x0=result.ci_lower, x1=result.ci_upper, fillcolor="seagreen", opacity=0.15, line_width=0)
    show_or_save(fig, save_to)
