"""Tests for field-level normalization rules."""

import pytest

from resale_intake.normalization.fields import (
    SizeDetection,
    StoreLocation,
    apply_size,
    clean_description,
    detect_consignment,
    detect_sizes,
    extract_vendor,
    extract_vendor_shorthand,
    find_keyword_percent,
    find_payout_split,
    infer_location,
    normalize_category_path,
    normalize_condition_input,
    normalize_description_lines,
    scan_size_labels,
    strip_banned_words,
    strip_exclamations,
    strip_size_lines,
)

ALLOWED_CONDITIONS = {f"{i / 2:.1f}".removesuffix(".0") for i in range(21)}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("9/10", "9"),
        ("8.7", "8.5"),
        ("8.75", "9"),
        ("7.5", "7.5"),
        ("12", "10"),
        ("like new, 10/10", "10"),
        (6, "6"),
        ("unknown", ""),
        ("", ""),
    ],
)
def test_normalize_condition_input(value, expected):
    assert normalize_condition_input(value) == expected


def test_condition_is_always_a_half_step_and_monotonic():
    previous = -1.0
    for quarter in range(0, 60):
        result = normalize_condition_input(str(quarter / 4))
        assert result in ALLOWED_CONDITIONS
        assert float(result) >= previous
        previous = float(result)


def test_normalize_category_path_accepts_both_separators():
    assert normalize_category_path("Mens › Shoes ›  Sneakers") == "Mens > Shoes > Sneakers"
    assert normalize_category_path("Womens>Bags") == "Womens > Bags"
    assert normalize_category_path("") == ""


class TestSizes:
    def test_scan_label_first_and_number_first(self):
        assert scan_size_labels("US 10.5 IT 44") == [("US", "10.5"), ("IT", "44")]
        assert scan_size_labels("fits 10 U.S.") == [("US", "10")]

    def test_scan_ignores_long_numbers(self):
        assert scan_size_labels("sell 900 US") == []

    def test_detect_prefers_earlier_text(self):
        assert detect_sizes("US 10", "us 9").us == "10"

    def test_detect_us_from_raw_and_alt_from_oracle(self):
        sizes = detect_sizes("IT 44", "Loafers, US 11, condition 8")
        assert sizes == SizeDetection(us="11", alt="44", alt_label="IT")

    def test_it_beats_eu_for_alt_slot(self):
        sizes = detect_sizes("EU 42 and IT 41 / US 8")
        assert sizes.alt_label == "IT"
        assert sizes.alt == "41"

    def test_pronouns_are_not_size_labels(self):
        assert scan_size_labels("9/10 it's clean, send it to us 10 days") == []
        assert detect_sizes("", "Nike Dunk US 10.5, 9/10 it's clean") == SizeDetection(us="10.5")

    def test_lowercase_label_after_size_word(self):
        assert scan_size_labels("size us 9 and size: it 42") == [("US", "9"), ("IT", "42")]
        assert scan_size_labels("fits 42 eu") == [("EU", "42")]

    def test_no_us_size(self):
        assert detect_sizes("12", "size 12").us_token == ""

    def test_apply_size_suffixes_item_name(self):
        item_name, description = apply_size("Dunk Low", "Suede upper.", SizeDetection(us="10.5"))
        assert item_name == "Dunk Low US 10.5"
        assert description == "Suede upper."

    def test_apply_size_does_not_repeat_suffix(self):
        item_name, _ = apply_size("Dunk US 10.5", "", SizeDetection(us="10.5"))
        assert item_name == "Dunk US 10.5"

    def test_apply_size_leaves_empty_item_name(self):
        item_name, _ = apply_size("", "", SizeDetection(us="9"))
        assert item_name == ""

    def test_apply_size_replaces_size_lines_with_combined_line(self):
        sizes = SizeDetection(us="11", alt="44", alt_label="IT")
        _, description = apply_size("Dunk Low", "Suede upper.\nSize IT 44", sizes)
        assert description == "Suede upper.\nSize: IT 44 / US 11"

    def test_strip_size_lines(self):
        assert strip_size_lines("Great shape\nsize: 9\nFits 42 EU\nDust bag") == "Great shape\nDust bag"


class TestLocation:
    def test_earliest_keyword_wins(self):
        assert infer_location("picked up at dupont, going to charlotte").label == "DuPont Store"
        assert infer_location("charlotte then dupont").label == "Charlotte Store"

    def test_no_keyword(self):
        assert infer_location("no store mentioned") is None
        assert infer_location("") is None

    def test_custom_stores(self):
        stores = (StoreLocation(key="soho", label="SoHo Store"),)
        assert infer_location("drop at SOHO", stores).key == "soho"


class TestConsignment:
    def test_split_wins(self):
        result = detect_consignment("consignment 70/30 split")
        assert result.is_consignment
        assert result.payout_pct == 70
        assert result.source == "split"

    def test_split_must_sum_to_100(self):
        assert find_payout_split("condition 9/10") is None
        assert find_payout_split("9/10 then 65/35") == 65.0

    def test_keyword_without_percent_uses_default(self):
        result = detect_consignment("we are selling it for him")
        assert result.is_consignment
        assert result.payout_pct == 60
        assert result.source == "default"

    def test_keyword_percent(self):
        result = detect_consignment("consigning at 65% payout")
        assert result.payout_pct == 65
        assert result.source == "keyword_percent"

    def test_percent_outside_window_is_ignored(self):
        raw = "consigned. " + "x" * 80 + " 50%"
        assert find_keyword_percent(raw) is None
        assert detect_consignment(raw).payout_pct == 60

    def test_payout_is_clamped(self):
        assert detect_consignment("consignment 150%").payout_pct == 100

    def test_custom_default(self):
        result = detect_consignment("consignment", default_payout_pct=55.0)
        assert result.payout_pct == 55

    def test_no_signal(self):
        result = detect_consignment("Rick Owens Ramone, cost 300, 9/10")
        assert not result.is_consignment
        assert result.payout_pct is None

    def test_oracle_payout_used_without_raw_signal(self):
        result = detect_consignment("Prada loafers", "70")
        assert result.is_consignment
        assert result.payout_pct == 70
        assert result.source == "oracle"

    def test_raw_signal_beats_oracle_payout(self):
        assert detect_consignment("consignment 80/20", "50").payout_pct == 80


class TestVendor:
    def test_vendor_label(self):
        assert extract_vendor("Jordan 1, vendor: Mike Jones, size 10") == "Mike Jones"

    def test_consignor_phrase(self):
        assert extract_vendor("Sarah Lee is consigning this bag") == "Sarah Lee"

    def test_consignor_phrase_without_punctuation(self):
        assert extract_vendor("Prada loafers size 9 Sarah is consigning") == "Sarah"
        assert extract_vendor("prada loafers size 9 sarah is consigning") == ""

    def test_vendor_label_followed_by_consigning(self):
        assert extract_vendor("vendor Mike is consigning") == "Mike"

    def test_no_vendor(self):
        assert extract_vendor("Prada loafers, size 9") == ""

    def test_shorthand(self):
        assert extract_vendor_shorthand("Consignment - Jane") == "Jane"
        assert extract_vendor_shorthand("consign: jane doe") == "jane doe"
        assert extract_vendor_shorthand("Jane") == ""


class TestDescription:
    def test_strip_exclamations(self):
        assert strip_exclamations("Wow! Clean!!") == "Wow. Clean."
        assert strip_exclamations("Clean!.") == "Clean."

    def test_strip_exclamations_keeps_existing_dots(self):
        assert strip_exclamations("Some wear...") == "Some wear..."
        assert strip_exclamations("Some wear... clean!") == "Some wear... clean."

    def test_clean_description_removes_structured_text(self):
        result = clean_description(
            "Rick Owens Ramone with amazing pony hair upper. Size 12. Condition: 9/10. DuPont store!",
            brand="Rick Owens",
            item_name="Ramone",
        )
        for removed in ("Rick Owens", "Ramone", "amazing", "Size", "Condition", "DuPont", "!"):
            assert removed not in result
        assert "pony hair upper" in result

    def test_clean_description_collapses_blank_lines(self):
        result = clean_description("Minor scuff on left toe!\r\n\r\n\r\nIncludes dust bag.")
        assert result == "Minor scuff on left toe.\nIncludes dust bag"

    def test_strip_banned_words(self):
        assert strip_banned_words("A stunning must-have jacket") == "A jacket"
        assert strip_banned_words("Greatly worn", ("great",)) == "Greatly worn"

    def test_normalize_description_lines(self):
        assert normalize_description_lines("  a  \n\n b\r\n") == "a\nb"
