"""Model fitting and resampling-based inference for the document-type effect."""

from .config import COMPLEXITY_FORMULAS, ComplexityFormulaName, InferenceConfig
from .engine import ComplexityInference, run_inference
from .formulas import RatioFormula, RawWithCovariateFormula, get_formula
from .ols import OLSModel, ResidualSummary
from .results import ModelFitResult
from .summary import DataSummary

__all__ = [
    "COMPLEXITY_FORMULAS",
    "ComplexityFormulaName",
    "ComplexityInference",
    "DataSummary",
    "InferenceConfig",
    "ModelFitResult",
    "OLSModel",
    "RatioFormula",
    "RawWithCovariateFormula",
    "ResidualSummary",
    "get_formula",
    "run_inference",
]
