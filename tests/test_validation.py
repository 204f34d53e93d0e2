"""Tests for oracle response validation."""

import json

import pytest

from resale_intake.exceptions import MalformedOracleOutput, SchemaViolation
from resale_intake.validation import parse_extraction_response


def test_parse_valid_response(rick_owens_oracle):
    result = parse_extraction_response(json.dumps(rick_owens_oracle))

    assert result.brand == "Rick Owens"
    assert result.item_name == "Pony Hair Ramone"
    assert result.shopify_description == ""


def test_parse_accepts_numeric_payout_and_cost():
    result = parse_extraction_response('{"consignmentPayoutPct": 70, "intakeCost": 12.5}')

    assert result.consignment_payout_pct == 70
    assert result.intake_cost == 12.5


def test_unexpected_field_is_schema_violation(rick_owens_oracle):
    payload = {**rick_owens_oracle, "unexpectedField": "x"}

    with pytest.raises(SchemaViolation) as exc_info:
        parse_extraction_response(json.dumps(payload))

    assert exc_info.value.fields == ["unexpectedField"]
    assert exc_info.value.issues[0]["type"] == "extra_forbidden"


def test_wrong_type_is_schema_violation():
    with pytest.raises(SchemaViolation) as exc_info:
        parse_extraction_response('{"brand": ["Rick", "Owens"]}')

    assert exc_info.value.fields == ["brand"]


def test_non_object_is_schema_violation():
    with pytest.raises(SchemaViolation) as exc_info:
        parse_extraction_response('["brand"]')

    assert exc_info.value.fields == ["$root"]


@pytest.mark.parametrize("content", ["not json", "", None, '{"brand": "Rick'])
def test_non_json_is_malformed(content):
    with pytest.raises(MalformedOracleOutput) as exc_info:
        parse_extraction_response(content)

    assert exc_info.value.content == (content or "").strip()
