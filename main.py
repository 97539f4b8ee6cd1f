from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer

from experiments.plots import ReportLayout, plot_complexity_by_type, plot_null_distribution
from experiments.report import render_result
from experiments.translationese import (
    annotate_corpus,
    load_complexity_table,
    run_translationese,
    transform_annotations,
)
from src.annotation import ensure_pipeline
from src.datahub import ALL_DOCUMENT_TYPES, DataRequest, prepare_corpus
from src.datahub.config import DEFAULT_DERIVED_ROOT, DEFAULT_RAW_ROOT, DEFAULT_REPORT_ROOT
from src.inference import ComplexityInference, InferenceConfig, ModelFitResult

app = typer.Typer()


def _subsets(values: List[str]) -> List[str]:
    selected = values or list(ALL_DOCUMENT_TYPES)
    unknown = [value for value in selected if value not in ALL_DOCUMENT_TYPES]
    if unknown:
        raise typer.BadParameter(f"Unknown subset(s) {', '.join(unknown)}. Options: {', '.join(ALL_DOCUMENT_TYPES)}")
    return selected


def _inference_config(
    balance_classes: bool,
    formula: str,
    permutations: int,
    bootstraps: int,
    confidence_level: float,
    seed: Optional[int],
    reference: str,
    comparison: str,
) -> InferenceConfig:
    config = InferenceConfig(
        balance_classes=balance_classes,
        complexity_formula=formula,  # type: ignore[arg-type]
        permutation_iterations=permutations,
        bootstrap_iterations=bootstraps,
        confidence_level=confidence_level,
        random_seed=seed,
        levels=(reference, comparison),
    )
    try:
        config.validate()
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return config


def _report(
    table: pd.DataFrame,
    result: ModelFitResult,
    config: InferenceConfig,
    report_root: Optional[Path],
    report_tag: Optional[str],
    save_static: bool,
    save_html: bool,
) -> None:
    layout: Optional[ReportLayout] = None
    if report_root:
        tag = report_tag or datetime.utcnow().strftime("%Y%m%d-%H%M%S")
        layout = ReportLayout(base_dir=report_root, run_tag=tag, save_static=save_static, save_html=save_html)
        print(f"[report] Saving results under {layout.run_dir}")

    render_result(result, layout)
    plot_complexity_by_type(
        ComplexityInference(config).complexity_by_type(table),
        result.formula,
        save_to=layout.figure("complexity_by_type") if layout else None,
    )
    plot_null_distribution(
        result,
        save_to=layout.figure("null_distribution") if layout else None,
    )


@app.command("datahub")
def datahub(
    url: Optional[str] = typer.Option(
        None,
        "--url",
        help="Archive (zip or tar) with the .dat/.tok corpus files. Omit to curate files already under --raw-root.",
    ),
    subsets: List[str] = typer.Option(
        [],
        "--subset",
        help="Subsets to curate (native, non-native, translation). Defaults to all.",
    ),
    force: bool = typer.Option(False, "--force", help="Redownload even if the archive exists."),
    raw_root: Path = typer.Option(
        DEFAULT_RAW_ROOT,
        "--raw-root",
        exists=False,
        file_okay=False,
        dir_okay=True,
        writable=True,
        help="Directory to store the raw corpus.",
    ),
    derived_root: Path = typer.Option(
        DEFAULT_DERIVED_ROOT,
        "--derived-root",
        exists=False,
        file_okay=False,
        dir_okay=True,
        writable=True,
        help="Directory to store curated and derived tables.",
    ),
) -> None:
    """
    Download the corpus and curate each subset into a CSV table with its data dictionary.
    """
    try:
        request = DataRequest.from_flags(url=url, subsets=subsets)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    prepare_corpus(request, raw_root=raw_root, derived_root=derived_root, force=force)


@app.command()
def annotate(
    subsets: List[str] = typer.Option([], "--subset", help="Subsets to annotate. Defaults to all."),
    sample_size: Optional[int] = typer.Option(
        None, "--sample-size", help="Annotate at most this many transcript lines per subset."
    ),
    seed: Optional[int] = typer.Option(123, "--seed", help="Seed for the document sample."),
    lang: str = typer.Option("en", "--lang", help="Stanza language code."),
    use_gpu: Optional[bool] = typer.Option(None, "--use-gpu/--no-gpu", help="Force GPU usage on or off."),
    resources_dir: Optional[Path] = typer.Option(None, "--resources-dir", help="Stanza resources directory."),
    download_models: bool = typer.Option(True, "--download-models/--no-download-models"),
    batch_size: int = typer.Option(64, "--batch-size", help="Documents per parser call."),
    derived_root: Path = typer.Option(DEFAULT_DERIVED_ROOT, "--derived-root"),
) -> None:
    """Run the dependency parser over the curated subsets."""
    pipeline = ensure_pipeline(lang, use_gpu, resources_dir=resources_dir, download_models=download_models)
    annotate_corpus(
        pipeline,
        derived_root=derived_root,
        document_types=_subsets(subsets),
        sample_size=sample_size,
        random_seed=seed,
        batch_size=batch_size,
    )


@app.command()
def transform(
    subsets: List[str] = typer.Option([], "--subset", help="Subsets to aggregate. Defaults to all."),
    derived_root: Path = typer.Option(DEFAULT_DERIVED_ROOT, "--derived-root"),
) -> None:
    """Aggregate token annotations into one complexity observation per sentence."""
    transform_annotations(derived_root=derived_root, document_types=_subsets(subsets))


@app.command()
def infer(
    balance_classes: bool = typer.Option(False, "--balance-classes/--no-balance-classes"),
    formula: str = typer.Option("ratio", "--formula", help="ratio or raw_with_covariate."),
    permutations: int = typer.Option(1000, "--permutations"),
    bootstraps: int = typer.Option(1000, "--bootstraps"),
    confidence_level: float = typer.Option(0.95, "--confidence-level"),
    seed: Optional[int] = typer.Option(123, "--seed", help="Random seed for balancing and resampling."),
    reference: str = typer.Option("native", "--reference", help="Reference document type."),
    comparison: str = typer.Option("translation", "--comparison", help="Document type compared to the reference."),
    derived_root: Path = typer.Option(DEFAULT_DERIVED_ROOT, "--derived-root"),
    report_root: Optional[Path] = typer.Option(
        DEFAULT_REPORT_ROOT,
        "--report-root",
        help="Directory where tables and plots are saved (subfolders are created automatically).",
    ),
    report_tag: Optional[str] = typer.Option(None, "--report-tag", help="Folder suffix for this run."),
    save_static: bool = typer.Option(True, help="Write static PNG snapshots when saving plots."),
    save_html: bool = typer.Option(True, help="Write interactive HTML plots when saving."),
) -> None:
    """Fit the complexity model and run the permutation test and bootstrap interval."""
    config = _inference_config(
        balance_classes, formula, permutations, bootstraps, confidence_level, seed, reference, comparison
    )
    table = load_complexity_table(derived_root)
    result = ComplexityInference(config).fit(table).result()
    _report(table, result, config, report_root, report_tag, save_static, save_html)


@app.command()
def run(
    subsets: List[str] = typer.Option([], "--subset", help="Subsets to annotate and aggregate. Defaults to all."),
    sample_size: Optional[int] = typer.Option(None, "--sample-size"),
    balance_classes: bool = typer.Option(False, "--balance-classes/--no-balance-classes"),
    formula: str = typer.Option("ratio", "--formula"),
    permutations: int = typer.Option(1000, "--permutations"),
    bootstraps: int = typer.Option(1000, "--bootstraps"),
    confidence_level: float = typer.Option(0.95, "--confidence-level"),
    seed: Optional[int] = typer.Option(123, "--seed"),
    reference: str = typer.Option("native", "--reference"),
    comparison: str = typer.Option("translation", "--comparison"),
    lang: str = typer.Option("en", "--lang"),
    use_gpu: Optional[bool] = typer.Option(None, "--use-gpu/--no-gpu"),
    resources_dir: Optional[Path] = typer.Option(None, "--resources-dir"),
    download_models: bool = typer.Option(True, "--download-models/--no-download-models"),
    batch_size: int = typer.Option(64, "--batch-size"),
    derived_root: Path = typer.Option(DEFAULT_DERIVED_ROOT, "--derived-root"),
    report_root: Optional[Path] = typer.Option(DEFAULT_REPORT_ROOT, "--report-root"),
    report_tag: Optional[str] = typer.Option(None, "--report-tag"),
    save_static: bool = typer.Option(True, help="Write static PNG snapshots when saving plots."),
    save_html: bool = typer.Option(True, help="Write interactive HTML plots when saving."),
) -> None:
    """Annotate, transform, infer and report on an already curated corpus."""
    config = _inference_config(
        balance_classes, formula, permutations, bootstraps, confidence_level, seed, reference, comparison
    )
    pipeline = ensure_pipeline(lang, use_gpu, resources_dir=resources_dir, download_models=download_models)
    table, result = run_translationese(
        pipeline,
        config,
        derived_root=derived_root,
        document_types=_subsets(subsets),
        sample_size=sample_size,
        batch_size=batch_size,
    )
    _report(table, result, config, report_root, report_tag, save_static, save_html)


if __name__ == "__main__":
    app()
