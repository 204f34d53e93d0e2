"""Data models for resale-intake."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ExtractionResult(BaseModel):
    """Structured field guess returned by the extraction oracle."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    brand: str = ""
    item_name: str = ""
    category_path: str = ""
    shopify_description: str = ""
    size: str = ""
    condition: str = ""
    cost: str = ""
    price: str = ""
    location: str = ""
    vendor_source: str = ""
    vendor: str = ""
    consignment_payout_pct: str | int | float = ""
    intake_cost: str | int | float = ""

    @classmethod
    def field_names(cls) -> list[str]:
        """Return the camelCase keys the oracle must answer with."""
        return [field.alias or name for name, field in cls.model_fields.items()]
