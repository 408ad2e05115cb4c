"""Normalization of foreign failures into the error taxonomy."""

from faultline.application.normalization.normalizer import (
    DEFAULT_RULES,
    PASSTHROUGH_RULE,
    ErrorNormalizer,
)
from faultline.application.normalization.rule import NormalizationRule

__all__ = ["DEFAULT_RULES", "PASSTHROUGH_RULE", "ErrorNormalizer", "NormalizationRule"]
