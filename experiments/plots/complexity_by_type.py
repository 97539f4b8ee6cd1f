"""Box plot of per-sentence complexity for each document type."""

from __future__ import annotations

from typing import Optional

import pandas as pd
import plotly.express as px

from .save_config import FigureTarget, show_or_save


def plot_complexity_by_type(
    complexity: pd.DataFrame,
    formula: str,
    save_to: Optional[FigureTarget] = None,
) -> None:
    """Visualize the ``syntactic_complexity`` distribution per ``type``."""
    if complexity.empty:
        return

    fig = px.box(
        complexity,
        x="type",
        y="syntactic_complexity",
        color="type",
        points="outliers",
        title=f"Syntactic complexity by document type ({formula})",
        labels={"type": "Document type", "syntactic_complexity": "Syntactic complexity"},
    )
    fig.update_layout(showlegend=False)
    show_or_save(fig, save_to)
