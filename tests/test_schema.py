"""Tests for schema models."""

import pytest
from pydantic import ValidationError

from resale_intake import ExtractionResult, NormalizedIntakeRecord


def test_extraction_all_empty():
    """ExtractionResult with no data should default to empty strings."""
    result = ExtractionResult()
    assert result.brand == ""
    assert result.item_name == ""
    assert result.consignment_payout_pct == ""


def test_extraction_accepts_camel_case_keys():
    result = ExtractionResult.model_validate({"itemName": "Ramone", "vendorSource": "Jane"})
    assert result.item_name == "Ramone"
    assert result.vendor_source == "Jane"


def test_extraction_rejects_unknown_keys():
    with pytest.raises(ValidationError):
        ExtractionResult.model_validate({"brand": "Rick Owens", "color": "black"})


def test_field_names_are_camel_case():
    assert ExtractionResult.field_names()[:3] == ["brand", "itemName", "categoryPath"]
    assert len(ExtractionResult.field_names()) == 13


def test_record_serializes_camel_case():
    record = NormalizedIntakeRecord(item_name="Ramone", is_consignment=True, consignment_payout_pct=70)
    data = record.model_dump(by_alias=True)
    assert data["itemName"] == "Ramone"
    assert data["isConsignment"] is True
    assert data["consignmentPayoutPct"] == 70


def test_record_payout_bounds():
    with pytest.raises(ValidationError):
        NormalizedIntakeRecord(consignment_payout_pct=120)
