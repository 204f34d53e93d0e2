"""Shared test fixtures for resale_intake tests."""

import json

import pytest

RICK_OWENS_RAW = "Rick Owens, pony hair, Ramone, size 12, sneaker, cost 300, sell 900, 9/10"


@pytest.fixture
def rick_owens_raw():
    return RICK_OWENS_RAW


@pytest.fixture
def rick_owens_oracle():
    """Oracle answer for the Rick Owens intake notes."""
    return {
        "brand": "Rick Owens",
        "itemName": "Pony Hair Ramone",
        "categoryPath": "Mens > Shoes > Sneakers",
        "size": "12",
        "condition": "9",
        "cost": "300",
        "price": "900",
        "location": "",
        "vendorSource": "",
        "vendor": "",
        "consignmentPayoutPct": "",
        "intakeCost": "",
    }


@pytest.fixture
def oracle_provider(mocker, rick_owens_oracle):
    """Mock provider answering with the Rick Owens extraction."""
    provider = mocker.MagicMock()
    provider.complete.return_value = json.dumps(rick_owens_oracle)
    provider.get_extraction_metadata.return_value = {"provider": "gemini", "model": "gemini-2.0-flash"}
    return provider
