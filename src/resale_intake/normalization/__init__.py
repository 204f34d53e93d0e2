"""Normalization utilities for resale-intake."""

from resale_intake.normalization.engine import (
    FIELD_RULES,
    FieldRule,
    IntakeNormalizationEngine,
    NormalizationConfig,
    normalize_extraction,
)
from resale_intake.normalization.fields import StoreLocation
from resale_intake.normalization.types import NormalizedIntakeRecord

__all__ = [
    "FIELD_RULES",
    "FieldRule",
    "IntakeNormalizationEngine",
    "NormalizationConfig",
    "NormalizedIntakeRecord",
    "StoreLocation",
    "normalize_extraction",
]
