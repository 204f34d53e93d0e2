"""resale-intake: Normalize free-text consignment intake notes into catalog-ready records."""

from resale_intake.core import normalize_intake
from resale_intake.listing import ListingDraft, compose_listing
from resale_intake.normalization import NormalizationConfig, NormalizedIntakeRecord, normalize_extraction
from resale_intake.schema import ExtractionResult

__version__ = "0.1.0"

__all__ = [
    "normalize_intake",
    "normalize_extraction",
    "compose_listing",
    "ExtractionResult",
    "ListingDraft",
    "NormalizationConfig",
    "NormalizedIntakeRecord",
    "__version__",
]
