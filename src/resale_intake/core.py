"""Core intake normalization function."""

from resale_intake.config import OracleSettings
from resale_intake.exceptions import InvalidRawInput, OracleUnavailable
from resale_intake.normalization.engine import IntakeNormalizationEngine, NormalizationConfig, VendorLookup
from resale_intake.normalization.types import NormalizedIntakeRecord
from resale_intake.prompt import build_extraction_request
from resale_intake.providers.base import BaseProvider
from resale_intake.validation import parse_extraction_response


def _build_gemini_provider(api_key: str | None, settings: OracleSettings) -> BaseProvider:
    from resale_intake.providers.gemini import GeminiProvider

    return GeminiProvider(api_key=api_key, settings=settings)


def _build_openai_provider(api_key: str | None, settings: OracleSettings) -> BaseProvider:
    from resale_intake.providers.openai import OpenAIProvider

    return OpenAIProvider(api_key=api_key, settings=settings)


def _select_provider(provider: str | BaseProvider | None, api_key: str | None) -> BaseProvider:
    if isinstance(provider, BaseProvider):
        return provider
    settings = OracleSettings.from_env(provider)
    if settings.provider in {"gemini", "google"}:
        return _build_gemini_provider(api_key, settings)
    if settings.provider in {"openai", "gpt"}:
        return _build_openai_provider(api_key, settings)
    raise OracleUnavailable(f"Unsupported provider: {settings.provider}")


def _check_raw_input(raw_input: object) -> str:
    if not isinstance(raw_input, str) or not raw_input.strip():
        raise InvalidRawInput("rawInput is required")
    return raw_input.strip()


def normalize_intake(
    raw_input: str,
    *,
    api_key: str | None = None,
    provider: str | BaseProvider | None = None,
    config: NormalizationConfig | None = None,
    vendor_directory: VendorLookup | None = None,
) -> NormalizedIntakeRecord:
    """Turn free-text intake notes into a normalized record.

    Args:
        raw_input: Staff notes; line 1 is conventionally the brand.
        api_key: Oracle API key. Falls back to the provider's env var.
        provider: Provider name (`gemini` or `openai`) or a provider
            instance. Defaults to `INTAKE_PROVIDER` env var, then `gemini`.
        config: Normalization rules. Defaults to built-in values.
        vendor_directory: Optional lookup for `consignment - X` vendor references.

    Returns:
        A complete NormalizedIntakeRecord.

    Raises:
        InvalidRawInput: If raw_input is empty or not a string.
        OracleUnavailable: If the oracle cannot be reached or the provider is unknown.
        MalformedOracleOutput: If the oracle response is not JSON.
        SchemaViolation: If the oracle JSON has the wrong shape.
    """
    record, _ = normalize_intake_with_metadata(
        raw_input,
        api_key=api_key,
        provider=provider,
        config=config,
        vendor_directory=vendor_directory,
    )
    return record


def normalize_intake_with_metadata(
    raw_input: str,
    *,
    api_key: str | None = None,
    provider: str | BaseProvider | None = None,
    config: NormalizationConfig | None = None,
    vendor_directory: VendorLookup | None = None,
) -> tuple[NormalizedIntakeRecord, dict[str, str]]:
    """Normalize intake notes and return provider metadata."""

    raw = _check_raw_input(raw_input)
    engine = IntakeNormalizationEngine(config=config, vendor_directory=vendor_directory)
    oracle = _select_provider(provider, api_key)
    settings = getattr(oracle, "settings", None)
    if not isinstance(settings, OracleSettings):
        settings = OracleSettings.from_env(provider if isinstance(provider, str) else None)

    request = build_extraction_request(
        raw,
        settings,
        stores=engine.config.store_locations,
        banned_words=engine.config.banned_description_words,
        default_payout_pct=engine.config.default_payout_pct,
    )
    extraction = parse_extraction_response(oracle.complete(request))
    record = engine.normalize(raw, extraction)
    metadata = oracle.get_extraction_metadata() or {}
    return record, metadata
