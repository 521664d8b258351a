"""Regularised classifiers and coefficient helpers."""

from .base import BaseProbe, LabelLike
from .coefficients import CoefficientExtractor, extract_coefficients
from .lasso_cv import LassoLogisticClassifier, fit_lasso_cv
from .lasso_path import LassoConfig, PathFit, fit_lasso_path, lambda_sequence
from .records import PathStep, RankedCoefficient, RegularizationPath, SignGroup

__all__ = [
    "BaseProbe",
    "CoefficientExtractor",
    "LabelLike",
    "LassoConfig",
    "LassoLogisticClassifier",
    "PathFit",
    "PathStep",
    "RankedCoefficient",
    "RegularizationPath",
    "SignGroup",
    "extract_coefficients",
    "fit_lasso_cv",
    "fit_lasso_path",
    "lambda_sequence",
]
