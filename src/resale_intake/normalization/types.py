"""Data models for normalization output."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NormalizedIntakeRecord(BaseModel):
    """Final intake record derived from raw text and the oracle's guess."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

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
    is_consignment: bool = False
    consignment_payout_pct: int | float | None = Field(default=None, ge=0, le=100)
    intake_cost: int | float | None = None
    warnings: list[str] = Field(default_factory=list)
