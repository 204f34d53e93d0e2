"""Listing composition: title, tags and downstream payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from resale_intake.normalization.fields import DEFAULT_STORE_LOCATIONS, StoreLocation, split_category_path
from resale_intake.normalization.primitives import (
    dedupe_adjacent_words,
    ends_with_word,
    parse_first_number,
)
from resale_intake.normalization.types import NormalizedIntakeRecord

PHOTO_TAG = "needs_photos"


class Pricing(BaseModel):
    cost: str = ""
    price: str = ""


class ListingDraft(BaseModel):
    """Display fields composed from a normalized record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    normalized_brand: str = ""
    category_path: str = ""
    category: str = ""
    sub_category: str = ""
    tags: list[str] = Field(default_factory=list)
    pricing: Pricing = Field(default_factory=Pricing)
    location: str = ""
    shopify_description: str = ""


class IntakeRow(BaseModel):
    """Row written to the intake record store."""

    title: str = Field(min_length=1)
    sku: str | None = None
    brand: str | None = None
    category: str | None = None
    condition: str | None = None
    price_cents: int | None = None
    notes: str | None = None


def category_parts(category_path: str | None) -> tuple[str, str]:
    """Return the top-level category and the leaf sub-category."""
    parts = split_category_path(category_path)
    fallback = (category_path or "").strip()
    if not parts:
        return fallback, fallback
    return parts[0], parts[-1]


def compose_title(brand: str, item_name: str, category_path: str) -> str:
    _, leaf = category_parts(category_path)
    item_name = item_name.strip()
    if ends_with_word(item_name, leaf):
        leaf = ""
    return dedupe_adjacent_words(" ".join(part.strip() for part in (brand, item_name, leaf) if part.strip()))


def compose_tags(size: str, condition: str, location_key: str) -> list[str]:
    tags = [
        f"{prefix}_{value.strip()}"
        for prefix, value in (("size", size), ("condition", condition), ("loc", location_key))
        if value and value.strip()
    ]
    tags.append(PHOTO_TAG)
    return tags


def location_key(location: str, stores: tuple[StoreLocation, ...] = DEFAULT_STORE_LOCATIONS) -> str:
    if not location:
        return ""
    for store in stores:
        if location.strip().lower() in (store.label.lower(), store.key.lower()):
            return store.key
    return "_".join(location.lower().split())


def compose_listing(
    record: NormalizedIntakeRecord,
    stores: tuple[StoreLocation, ...] = DEFAULT_STORE_LOCATIONS,
) -> ListingDraft:
    category, sub_category = category_parts(record.category_path)
    return ListingDraft(
        title=compose_title(record.brand, record.item_name, record.category_path),
        normalized_brand=record.brand.strip(),
        category_path=record.category_path,
        category=category,
        sub_category=sub_category,
        tags=compose_tags(record.size, record.condition, location_key(record.location, stores)),
        pricing=Pricing(cost=record.cost, price=record.price),
        location=record.location,
        shopify_description=record.shopify_description,
    )


def _price_cents(price: str) -> int | None:
    parsed = parse_first_number(price)
    return int(round(parsed * 100)) if parsed is not None else None


def build_product_payload(listing: ListingDraft, record: NormalizedIntakeRecord) -> dict:
    """Build the Shopify Admin ``products.json`` body for a draft listing."""
    body_parts = [line for line in record.shopify_description.splitlines() if line.strip()]
    if record.condition:
        body_parts.append(f"Condition: {record.condition}/10")

    cents = _price_cents(record.price)
    product = {
        "title": listing.title or "Untitled product",
        "body_html": "<br>".join(body_parts) or None,
        "vendor": record.vendor or record.brand or None,
        "product_type": listing.category_path or None,
        "tags": listing.tags or None,
        "status": "draft",
        "variants": [{"price": f"{cents / 100:.2f}" if cents is not None else "0.00"}],
    }
    return {"product": {key: value for key, value in product.items() if value is not None}}


def build_notes(record: NormalizedIntakeRecord) -> str | None:
    lines = []
    if record.shopify_description:
        lines.append(f"Description: {record.shopify_description}")
    if record.size:
        lines.append(f"Size: {record.size}")
    cost = parse_first_number(record.cost)
    if cost is not None and cost > 0:
        lines.append(f"Cost: ${record.cost}")
    if record.vendor:
        lines.append(f"Vendor: {record.vendor}")
    if record.is_consignment and record.consignment_payout_pct is not None:
        lines.append(f"Consignment payout: {record.consignment_payout_pct}%")
    if record.location:
        lines.append(f"Location: {record.location}")
    return "\n".join(lines) if lines else None


def build_record_row(record: NormalizedIntakeRecord, listing: ListingDraft) -> IntakeRow:
    return IntakeRow(
        title=listing.title or record.item_name or "Untitled product",
        brand=record.brand or None,
        category=record.category_path or None,
        condition=record.condition or None,
        price_cents=_price_cents(record.price),
        notes=build_notes(record),
    )
