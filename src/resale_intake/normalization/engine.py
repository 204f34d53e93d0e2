"""Normalization engine that merges oracle output with raw-text rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Protocol

from resale_intake.config import env, safe_float, safe_int
from resale_intake.exceptions import VendorDirectoryError
from resale_intake.normalization.fields import (
    BANNED_DESCRIPTION_WORDS,
    DEFAULT_PAYOUT_PCT,
    DEFAULT_STORE_LOCATIONS,
    PAYOUT_KEYWORD_WINDOW,
    ConsignmentDetection,
    StoreLocation,
    apply_size,
    clean_description,
    detect_consignment,
    detect_sizes,
    extract_vendor,
    extract_vendor_shorthand,
    infer_location,
    normalize_category_path,
    normalize_condition_input,
)
from resale_intake.normalization.primitives import (
    as_number,
    dedupe_adjacent_words,
    parse_first_number,
    parse_money,
)
from resale_intake.normalization.types import NormalizedIntakeRecord
from resale_intake.schema import ExtractionResult

logger = logging.getLogger(__name__)


class VendorLookup(Protocol):
    def lookup(self, query: str) -> str | None: ...


@dataclass(frozen=True)
class NormalizationConfig:
    default_vendor: str | None = None
    default_payout_pct: float = DEFAULT_PAYOUT_PCT
    payout_keyword_window: int = PAYOUT_KEYWORD_WINDOW
    store_locations: tuple[StoreLocation, ...] = DEFAULT_STORE_LOCATIONS
    banned_description_words: tuple[str, ...] = BANNED_DESCRIPTION_WORDS

    @classmethod
    def from_env(cls) -> "NormalizationConfig":
        return cls(
            default_vendor=env("INTAKE_DEFAULT_VENDOR"),
            default_payout_pct=safe_float(env("INTAKE_DEFAULT_PAYOUT_PCT"), DEFAULT_PAYOUT_PCT),
            payout_keyword_window=safe_int(env("INTAKE_PAYOUT_KEYWORD_WINDOW"), PAYOUT_KEYWORD_WINDOW),
            store_locations=parse_store_locations(env("INTAKE_STORE_LOCATIONS")),
        )


def parse_store_locations(raw: str | None) -> tuple[StoreLocation, ...]:
    """Parse ``key=Label,key=Label`` into store locations."""
    if not raw:
        return DEFAULT_STORE_LOCATIONS
    stores: list[StoreLocation] = []
    for item in raw.split(","):
        key, sep, label = item.partition("=")
        key, label = key.strip().lower(), label.strip()
        if sep and key and label:
            stores.append(StoreLocation(key=key, label=label))
    return tuple(stores) or DEFAULT_STORE_LOCATIONS


Detector = Callable[[str, ExtractionResult, NormalizationConfig], str]


@dataclass(frozen=True)
class FieldRule:
    """Precedence between a raw-text detector and the oracle for one field."""

    field: str
    detect: Detector
    oracle_value: Callable[[ExtractionResult], str]
    overrides_oracle: bool = True
    oracle_fallback: bool = True

    def resolve(self, raw: str, extraction: ExtractionResult, config: NormalizationConfig) -> str:
        detected = self.detect(raw, extraction, config).strip()
        if detected and self.overrides_oracle:
            return detected
        oracle = self.oracle_value(extraction).strip() if self.oracle_fallback else ""
        return oracle or detected


def _detect_location(raw: str, extraction: ExtractionResult, config: NormalizationConfig) -> str:
    store = infer_location(raw, config.store_locations)
    return store.label if store else ""


def _detect_vendor(raw: str, extraction: ExtractionResult, config: NormalizationConfig) -> str:
    return extract_vendor(raw)


def _detect_size(raw: str, extraction: ExtractionResult, config: NormalizationConfig) -> str:
    return detect_sizes(extraction.size, raw).us_token


FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule(
        "location",
        _detect_location,
        lambda extraction: extraction.location,
        oracle_fallback=False,
    ),
    FieldRule(
        "vendor",
        _detect_vendor,
        lambda extraction: extraction.vendor or extraction.vendor_source,
    ),
    FieldRule(
        "size",
        _detect_size,
        lambda extraction: extraction.size,
    ),
)


class IntakeNormalizationEngine:
    """Deterministic merge of an oracle extraction and the raw intake text."""

    def __init__(
        self,
        config: NormalizationConfig | None = None,
        vendor_directory: VendorLookup | None = None,
    ):
        self.config = config or NormalizationConfig()
        self.vendor_directory = vendor_directory

    def normalize(self, raw_input: str, extraction: ExtractionResult) -> NormalizedIntakeRecord:
        raw = raw_input.strip()
        warnings: list[str] = []
        resolved = {rule.field: rule.resolve(raw, extraction, self.config) for rule in FIELD_RULES}

        brand = extraction.brand.strip() or _brand_from_raw(raw)
        description = clean_description(
            extraction.shopify_description,
            brand=brand,
            item_name=extraction.item_name,
            stores=self.config.store_locations,
            banned_words=self.config.banned_description_words,
        )
        item_name, description = apply_size(
            dedupe_adjacent_words(extraction.item_name.strip()),
            description,
            detect_sizes(extraction.size, raw),
        )

        consignment = detect_consignment(
            raw,
            extraction.consignment_payout_pct,
            default_payout_pct=self.config.default_payout_pct,
            keyword_window=self.config.payout_keyword_window,
        )
        cost = parse_money(extraction.cost) or parse_money(extraction.intake_cost)
        intake_cost = None
        if consignment.is_consignment:
            cost = "0"
        else:
            parsed_cost = parse_first_number(cost)
            intake_cost = as_number(parsed_cost) if parsed_cost is not None else None

        vendor = self._resolve_vendor(resolved["vendor"], consignment, cost, warnings)

        condition = normalize_condition_input(extraction.condition)
        if not condition:
            warnings.append("condition_missing")
        price = parse_money(extraction.price)
        if not price:
            warnings.append("price_missing")

        return NormalizedIntakeRecord(
            brand=brand,
            item_name=item_name,
            category_path=normalize_category_path(extraction.category_path),
            shopify_description=description,
            size=resolved["size"],
            condition=condition,
            cost=cost,
            price=price,
            location=resolved["location"],
            vendor_source=vendor or extraction.vendor_source.strip(),
            vendor=vendor,
            is_consignment=consignment.is_consignment,
            consignment_payout_pct=consignment.payout_pct,
            intake_cost=intake_cost,
            warnings=warnings,
        )

    def _resolve_vendor(
        self,
        vendor: str,
        consignment: ConsignmentDetection,
        cost: str,
        warnings: list[str],
    ) -> str:
        if not vendor and self._needs_default_vendor(consignment, cost):
            vendor = self.config.default_vendor or ""

        fragment = extract_vendor_shorthand(vendor)
        if not fragment:
            return vendor
        if self.vendor_directory is None:
            return fragment
        try:
            match = self.vendor_directory.lookup(fragment)
        except VendorDirectoryError:
            logger.warning("vendor lookup failed for %r, keeping extracted name", fragment, exc_info=True)
            warnings.append("vendor_lookup_failed")
            return fragment
        return match or fragment

    def _needs_default_vendor(self, consignment: ConsignmentDetection, cost: str) -> bool:
        if not self.config.default_vendor or consignment.is_consignment:
            return False
        parsed_cost = parse_first_number(cost)
        return parsed_cost is not None and parsed_cost > 0


def normalize_extraction(
    raw_input: str,
    extraction: ExtractionResult,
    *,
    config: NormalizationConfig | None = None,
    vendor_directory: VendorLookup | None = None,
) -> NormalizedIntakeRecord:
    """Normalize an already validated extraction against its raw input."""

    engine = IntakeNormalizationEngine(config=config, vendor_directory=vendor_directory)
    return engine.normalize(raw_input, extraction)


def _brand_from_raw(raw: str) -> str:
    lines = [line.strip() for line in raw.splitlines() if line.strip()]
    return lines[0] if len(lines) > 1 else ""
