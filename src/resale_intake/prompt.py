"""Extraction prompt for the intake oracle."""

from __future__ import annotations

import json
from dataclasses import dataclass

from resale_intake.config import OracleSettings
from resale_intake.normalization.fields import (
    BANNED_DESCRIPTION_WORDS,
    DEFAULT_PAYOUT_PCT,
    DEFAULT_STORE_LOCATIONS,
    StoreLocation,
)
from resale_intake.schema import ExtractionResult

SYSTEM_INSTRUCTION = "Return JSON only. No extra text."

EXAMPLE_INPUT = "Rick Owens, pony hair, Ramone, size 12, sneaker, cost 300, sell 900, 9/10"
EXAMPLE_OUTPUT = {
    "brand": "Rick Owens",
    "itemName": "Pony Hair Ramone",
    "categoryPath": "Mens > Shoes > Sneakers",
    "shopifyDescription": "",
    "size": "12",
    "condition": "9",
    "cost": "300",
    "price": "900",
    "location": "",
    "vendorSource": "",
    "vendor": "",
    "consignmentPayoutPct": "",
    "intakeCost": "300",
}


@dataclass(frozen=True)
class ExtractionRequest:
    prompt: str
    system_instruction: str
    model: str
    temperature: float


def build_extraction_prompt(
    raw_input: str,
    *,
    stores: tuple[StoreLocation, ...] = DEFAULT_STORE_LOCATIONS,
    banned_words: tuple[str, ...] = BANNED_DESCRIPTION_WORDS,
    default_payout_pct: float = DEFAULT_PAYOUT_PCT,
) -> str:
    """Build the instruction block sent to the oracle for one raw input."""
    store_rules = "; ".join(f'"{store.key}" -> "{store.label}"' for store in stores)
    default_payout = f"{default_payout_pct:g}"
    lines = [
        "You are extracting product intake fields from freeform text for a resale store.",
        "The input may be multiline: line 1 can be the brand, line 2+ includes item details.",
        "Use the brand line as brand only; do not repeat the brand in itemName.",
        "Return JSON only with exactly these keys, all as strings:",
        ", ".join(ExtractionResult.field_names()) + ".",
        "If any value is unknown, return an empty string.",
        "Do not hallucinate. Keep brand exact. Keep itemName short.",
        "Avoid adjacent duplicate words in itemName. Do not repeat category words in itemName.",
        "categoryPath uses ' > ' between levels, for example 'Mens > Shoes > Sneakers'.",
        "Condition must be a numeric string 0-10 without '/10'. If condition is written like 9/10, return 9.",
        "Cost, price and intakeCost must be numeric strings without '$' or commas.",
        "Size: copy the size as written. Keep region labels such as US, IT or EU (e.g. 'US 10.5', 'IT 44').",
        "shopifyDescription must ONLY include notes not represented by structured fields.",
        "Do not include brand, itemName, categoryPath, size, condition score, cost, price, vendor, or location in it.",
        "If there are no additional notes, return an empty string for shopifyDescription.",
        "Tone must be neutral, factual, and professional. Do not address the reader.",
        "No hype words or opinions. Do not use subjective adjectives like: " + ", ".join(banned_words) + ".",
        "Do not use exclamation points.",
        "Keep it concise: 1-2 sentences max, only facts such as damage, material, finish, construction, accessories.",
        "Consignment: the item is consigned when the text mentions consign, consignment, consigning, consigned,"
        " consignee, 'selling it for', or a payout split like 60/40.",
        "For a split A/B, consignmentPayoutPct is A. Otherwise use a percent written near the consignment words,"
        f" else {default_payout}.",
        "For consigned items cost is 0 and intakeCost is empty; for purchased items intakeCost equals cost.",
        "Vendor: use the name after 'vendor:' or the name before 'is consigning'. Put it in vendor and vendorSource.",
        f"Location: only fill it when the text names a store ({store_rules}); otherwise return an empty string.",
        f'Example input: "{EXAMPLE_INPUT}"',
        f"Example output: {json.dumps(EXAMPLE_OUTPUT)}",
        f'Input: """{raw_input}"""',
    ]
    return "\n".join(lines)


def build_extraction_request(
    raw_input: str,
    settings: OracleSettings | None = None,
    *,
    stores: tuple[StoreLocation, ...] = DEFAULT_STORE_LOCATIONS,
    banned_words: tuple[str, ...] = BANNED_DESCRIPTION_WORDS,
    default_payout_pct: float = DEFAULT_PAYOUT_PCT,
) -> ExtractionRequest:
    settings = settings or OracleSettings()
    return ExtractionRequest(
        prompt=build_extraction_prompt(
            raw_input,
            stores=stores,
            banned_words=banned_words,
            default_payout_pct=default_payout_pct,
        ),
        system_instruction=SYSTEM_INSTRUCTION,
        model=settings.model,
        temperature=settings.temperature,
    )
