"""Tests for the complexity model, resampling procedures and class balancing."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any

import numpy as np
import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.inference import (
    ComplexityInference,
    InferenceConfig,
    OLSModel,
    RatioFormula,
    RawWithCovariateFormula,
    get_formula,
    run_inference,
)
from src.inference.balancing import balance_levels, level_counts
from src.inference.formulas import DesignMatrix, build_design
from src.inference.resampling import bootstrap_distribution, percentile_interval, two_sided_p_value
from src.inference.summary import inspect_table
from src.metrics import InsufficientDataError


# ---------------------------------------------------------------------------
# Helper fixtures and utilities


def _complexity_table(
    rng: np.random.Generator,
    n_native: int,
    n_translation: int,
    *,
    translation_shift: int = 0,
    n_non_native: int = 0,
) -> pd.DataFrame:
    types = ["native"] * n_native + ["translation"] * n_translation + ["non-native"] * n_non_native
    n_rows = len(types)
    t_units = rng.integers(0, 4, size=n_rows)
    shift = np.array([translation_shift if value == "translation" else 0 for value in types])
    return pd.DataFrame(
        {
            "doc_id": np.arange(1, n_rows + 1),
            "type": types,
            "t_units": t_units + shift,
            "word_len": rng.integers(5, 25, size=n_rows),
            "text": [f"sentence {idx}" for idx in range(n_rows)],
        }
    )


def _config(**overrides: Any) -> InferenceConfig:
    values = dict(permutation_iterations=99, bootstrap_iterations=99, random_seed=11, show_progress=False)
    values.update(overrides)
    return InferenceConfig(**values)


# ---------------------------------------------------------------------------
# Configuration


def test_default_config_is_valid() -> None:
    config = InferenceConfig()
    config.validate()
    assert config.levels == ("native", "translation")
    assert config.complexity_formula == "ratio"


@pytest.mark.parametrize(
    "overrides",
    [
        {"complexity_formula": "log_ratio"},
        {"permutation_iterations": 0},
        {"bootstrap_iterations": 0},
        {"confidence_level": 1.0},
        {"confidence_level": 0.0},
        {"random_seed": -1},
        {"levels": ("native", "native")},
    ],
)
def test_config_validation_rejects(overrides: dict) -> None:
    with pytest.raises(ValueError):
        InferenceConfig(**overrides).validate()


# ---------------------------------------------------------------------------
# Formulas and design matrix


def test_ratio_formula_divides_by_length() -> None:
    table = pd.DataFrame({"type": ["native", "translation"], "t_units": [1, 3], "word_len": [4, 6]})
    formula = get_formula("ratio")
    assert isinstance(formula, RatioFormula)
    np.testing.assert_allclose(formula.response(table), [0.25, 0.5])
    assert formula.covariates(table).shape == (2, 0)


def test_raw_formula_uses_length_covariate() -> None:
    table = pd.DataFrame({"type": ["native", "translation"], "t_units": [1, 3], "word_len": [4, 6]})
    design = build_design(table, RawWithCovariateFormula(), ("native", "translation"))
    np.testing.assert_allclose(design.response, [1.0, 3.0])
    np.testing.assert_allclose(design.features, [[0.0, 4.0], [1.0, 6.0]])
    np.testing.assert_allclose(design.indicator, [0.0, 1.0])


def test_formulas_reject_non_positive_length() -> None:
    table = pd.DataFrame({"type": ["native"], "t_units": [1], "word_len": [0]})
    with pytest.raises(ValueError):
        RatioFormula().response(table)
    with pytest.raises(ValueError):
        get_formula("cubic")


def test_build_design_rejects_unexpected_levels() -> None:
    table = pd.DataFrame({"type": ["native", "non-native"], "t_units": [1, 1], "word_len": [3, 3]})
    with pytest.raises(ValueError):
        build_design(table, RatioFormula(), ("native", "translation"))


# ---------------------------------------------------------------------------
# OLS


def test_ols_slope_equals_mean_difference_with_classical_se() -> None:
    rng = np.random.default_rng(5)
    indicator = np.array([0.0] * 12 + [1.0] * 8)
    response = rng.normal(size=20) + 0.5 * indicator

    model = OLSModel().fit(indicator.reshape(-1, 1), response)

    group0 = response[indicator == 0]
    group1 = response[indicator == 1]
    assert model.coef_[0] == pytest.approx(group1.mean() - group0.mean())
    assert model.intercept_ == pytest.approx(group0.mean())

    rss = ((group0 - group0.mean()) ** 2).sum() + ((group1 - group1.mean()) ** 2).sum()
    sigma2 = rss / (20 - 2)
    expected_se = np.sqrt(sigma2 * (1 / 12 + 1 / 8))
    assert model.std_errors_ is not None
    assert model.std_errors_[0] == pytest.approx(expected_se)
    assert model.residuals_ is not None
    assert model.residuals_.df == 18


def test_ols_requires_fit_and_matching_shapes() -> None:
    with pytest.raises(RuntimeError):
        OLSModel().predict([[1.0]])
    with pytest.raises(ValueError):
        OLSModel().fit([[0.0], [1.0]], [1.0])
    with pytest.raises(ValueError):
        OLSModel().fit([[0.0], [1.0]], [1.0, float("nan")])


# ---------------------------------------------------------------------------
# Resampling helpers


def test_two_sided_p_value_counts_extreme_statistics() -> None:
    null = np.array([-3.0, -1.0, 0.0, 1.0, 2.0, 3.0])
    assert two_sided_p_value(null, 2.0) == pytest.approx(0.5)
    assert two_sided_p_value(null, -2.0) == pytest.approx(0.5)
    assert two_sided_p_value(null, 10.0) == 0.0
    with pytest.raises(ValueError):
        two_sided_p_value(np.array([]), 1.0)


def test_bootstrap_keeps_both_levels_in_every_replicate() -> None:
    indicator = np.array([0.0] * 30 + [1.0] * 2)
    design = DesignMatrix(
        response=5.0 * indicator,
        features=indicator.reshape(-1, 1),
        reference="native",
        comparison="translation",
    )

    draws = bootstrap_distribution(design, 200, np.random.SeedSequence(0))

    # A replicate without the comparison level would refit a zero slope.
    np.testing.assert_allclose(draws, 5.0)


def test_percentile_interval_bounds() -> None:
    draws = np.arange(0, 101, dtype=np.float64)
    assert percentile_interval(draws, 0.9) == pytest.approx((5.0, 95.0))
    with pytest.raises(ValueError):
        percentile_interval(draws, 1.5)


# ---------------------------------------------------------------------------
# Balancing


def test_balancing_downsamples_majority_to_minority() -> None:
    table = _complexity_table(np.random.default_rng(0), 100, 20)
    balanced = balance_levels(table, np.random.default_rng(1))

    assert level_counts(balanced) == {"native": 20, "translation": 20}
    assert balanced.loc[balanced["type"] == "translation"].equals(table.loc[table["type"] == "translation"])
    assert balanced["doc_id"].is_unique
    assert list(balanced["doc_id"]) == sorted(balanced["doc_id"])


def test_engine_balancing_reports_balanced_counts() -> None:
    table = _complexity_table(np.random.default_rng(0), 100, 20)
    result = run_inference(table, _config(balance_classes=True))

    assert result.balanced is True
    assert result.level_counts == {"native": 20, "translation": 20}
    assert result.summary.level_counts == {"native": 100, "translation": 20}
    assert result.summary.imbalance_ratio == pytest.approx(5.0)


# ---------------------------------------------------------------------------
# Engine


def test_engine_is_reproducible_for_a_seed() -> None:
    table = _complexity_table(np.random.default_rng(2), 30, 25)

    first = run_inference(table, _config(random_seed=7, balance_classes=True))
    second = run_inference(table, _config(random_seed=7, balance_classes=True))

    assert first.p_value == second.p_value
    assert first.ci_lower == second.ci_lower
    assert first.ci_upper == second.ci_upper
    assert first.null_distribution == second.null_distribution


def test_engine_detects_strong_effect() -> None:
    table = _complexity_table(np.random.default_rng(3), 30, 30, translation_shift=4)
    result = run_inference(table, _config(complexity_formula="raw_with_covariate", permutation_iterations=199))

    assert result.estimate > 0
    assert result.p_value < 0.05
    assert result.ci_lower <= result.estimate <= result.ci_upper
    assert result.ci_lower > 0
    assert result.term == "type[translation]"
    assert len(result.null_distribution) == 199
    assert list(result.null_distribution) == sorted(result.null_distribution)


def test_engine_p_value_within_unit_interval() -> None:
    for seed in range(5):
        table = _complexity_table(np.random.default_rng(seed), 15, 12)
        result = run_inference(table, _config(random_seed=seed))
        assert 0.0 <= result.p_value <= 1.0


def test_engine_rejects_level_with_single_observation() -> None:
    table = _complexity_table(np.random.default_rng(4), 10, 1)
    with pytest.raises(InsufficientDataError) as excinfo:
        run_inference(table, _config())
    assert excinfo.value.level == "translation"
    assert excinfo.value.count == 1


def test_engine_names_short_level_when_balancing() -> None:
    table = _complexity_table(np.random.default_rng(4), 10, 1)
    with pytest.raises(InsufficientDataError) as excinfo:
        run_inference(table, _config(balance_classes=True))
    assert excinfo.value.level == "translation"
    assert excinfo.value.count == 1


def test_engine_summary_reports_missing_counts() -> None:
    table = _complexity_table(np.random.default_rng(9), 10, 10)
    table["t_units"] = table["t_units"].astype(float)
    table.loc[[0, 4, 15], "t_units"] = np.nan

    result = run_inference(table, _config())

    assert result.summary.n_rows == 20
    assert result.summary.missing["t_units"] == 3
    assert result.summary.missing["word_len"] == 0
    assert result.summary.level_counts == {"native": 10, "translation": 10}
    assert result.level_counts == {"native": 8, "translation": 9}


def test_engine_missing_rows_can_leave_level_short() -> None:
    table = _complexity_table(np.random.default_rng(10), 10, 3)
    table["t_units"] = table["t_units"].astype(float)
    table.loc[[10, 11], "t_units"] = np.nan
    with pytest.raises(InsufficientDataError) as excinfo:
        run_inference(table, _config())
    assert excinfo.value.level == "translation"
    assert excinfo.value.count == 1


def test_engine_excludes_unselected_levels() -> None:
    table = _complexity_table(np.random.default_rng(6), 10, 10, n_non_native=7)

    result = run_inference(table, _config())
    assert result.level_counts == {"native": 10, "translation": 10}

    non_native = run_inference(table, _config(levels=("native", "non-native")))
    assert non_native.level_counts == {"native": 10, "non-native": 7}
    assert non_native.term == "type[non-native]"


def test_result_requires_fit() -> None:
    with pytest.raises(RuntimeError):
        ComplexityInference(_config()).result()


def test_result_frame_and_complexity_by_type() -> None:
    table = _complexity_table(np.random.default_rng(8), 12, 9)
    engine = ComplexityInference(_config()).fit(table)

    frame = engine.result().to_frame()
    assert list(frame.columns) == ["statistic", "value"]
    assert "estimate" in set(frame["statistic"])

    complexity = engine.complexity_by_type(table)
    assert list(complexity.columns) == ["type", "syntactic_complexity"]
    assert len(complexity) == 21


def test_inspect_table_reports_missing_and_counts() -> None:
    table = pd.DataFrame(
        {"type": ["native", "native", "translation"], "t_units": [1, None, 2], "word_len": [3, 4, 5]}
    )
    summary = inspect_table(table, ("native", "translation"))
    assert summary.n_rows == 3
    assert summary.missing["t_units"] == 1
    assert summary.level_counts == {"native": 2, "translation": 1}
    assert summary.imbalance_ratio == pytest.approx(2.0)


# ---------------------------------------------------------------------------
# Null hypothesis calibration


def test_p_values_are_centred_under_the_null() -> None:
    p_values = []
    for trial in range(50):
        rng = np.random.default_rng(1000 + trial)
        table = _complexity_table(rng, 20, 20)
        table["type"] = rng.permutation(table["type"].to_numpy())
        result = run_inference(table, _config(random_seed=trial, bootstrap_iterations=20))
        p_values.append(result.p_value)

    assert 0.3 <= float(np.mean(p_values)) <= 0.7
    assert min(p_values) < 0.5 < max(p_values)
