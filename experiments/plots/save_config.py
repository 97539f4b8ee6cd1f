"""Where a run's figures and tables are written."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import plotly.graph_objects as go


@dataclass(frozen=True)
class FigureTarget:
    """One figure's output files; ``formats`` is a subset of ``("png", "html")``."""

    directory: Path
    slug: str
    formats: Tuple[str, ...]

    def path(self, fmt: str) -> Path:
        return self.directory / f"{self.slug}.{fmt}"

    def write(self, fig: go.Figure) -> List[Path]:
        self.directory.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for fmt in self.formats:
            target = self.path(fmt)
            if fmt == "png":
                fig.write_image(str(target), engine="kaleido")
            elif fmt == "html":
                fig.write_html(str(target), include_plotlyjs="cdn", full_html=True)
            else:
                raise ValueError(f"Unsupported figure format '{fmt}'")
            written.append(target)
        return written


def show_or_save(fig: go.Figure, target: Optional[FigureTarget]) -> None:
    """Open ``fig`` interactively, or write it when a target is given."""
    if target is None:
        fig.show()
        return
    for path in target.write(fig):
        print(f"[report] Wrote {path}")


@dataclass(frozen=True)
class ReportLayout:
    """Run folder ``<base_dir>/<run_tag>`` holding every table and figure of one inference run."""

    base_dir: Path
    run_tag: str
    save_static: bool = True
    save_html: bool = True

    @property
    def run_dir(self) -> Path:
        return self.base_dir / self.run_tag

    @property
    def formats(self) -> Tuple[str, ...]:
        enabled = []
        if self.save_static:
            enabled.append("png")
        if self.save_html:
            enabled.append("html")
        return tuple(enabled)

    def figure(self, slug: str) -> Optional[FigureTarget]:
        """Target for ``slug``; ``None`` when every format is disabled, so the figure is shown instead."""
        if not self.formats:
            return None
        return FigureTarget(directory=self.run_dir, slug=slug, formats=self.formats)

    def table(self, name: str) -> Path:
        return self.run_dir / f"{name}.csv"


__all__ = ["FigureTarget", "ReportLayout", "show_or_save"]
