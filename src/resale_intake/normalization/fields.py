"""Field-level rules that turn loosely formatted intake text into clean values."""

from __future__ import annotations

import re
from dataclasses import dataclass

from resale_intake.normalization.primitives import (
    Number,
    as_number,
    clamp,
    dedupe_adjacent_words,
    escape_regex,
    format_number,
    parse_first_number,
    round_to_half,
)


@dataclass(frozen=True)
class StoreLocation:
    key: str
    label: str


DEFAULT_STORE_LOCATIONS: tuple[StoreLocation, ...] = (
    StoreLocation(key="dupont", label="DuPont Store"),
    StoreLocation(key="charlotte", label="Charlotte Store"),
)

BANNED_DESCRIPTION_WORDS: tuple[str, ...] = (
    "stylish",
    "great",
    "amazing",
    "beautiful",
    "stunning",
    "premium",
    "luxury",
    "perfect",
    "incredible",
    "iconic",
    "must-have",
)

DEFAULT_PAYOUT_PCT = 60.0
PAYOUT_KEYWORD_WINDOW = 60

# Condition


def normalize_condition_input(value: object) -> str:
    """Return a 0-10 condition score snapped to the nearest half point."""
    parsed = parse_first_number(value)
    if parsed is None:
        return ""
    return format_number(round_to_half(clamp(parsed, 0, 10)))


# Category


def split_category_path(path: str | None) -> list[str]:
    if not path:
        return []
    return [part.strip() for part in re.split(r"›|>", path) if part.strip()]


def normalize_category_path(path: str | None) -> str:
    return " > ".join(split_category_path(path))


# Size

_SIZE_LABEL = r"U\.?S\.?|IT|(?i:eu)"
_SIZE_NUMBER = r"\d{1,2}(?:\.\d)?"
# Lowercase "us" and "it" are pronouns unless they follow the word "size".
_LABEL_FIRST = re.compile(rf"\b(?P<label>{_SIZE_LABEL})(?!['A-Za-z])\s*(?P<number>{_SIZE_NUMBER})\b")
_NUMBER_FIRST = re.compile(rf"\b(?P<number>{_SIZE_NUMBER})\s*(?P<label>{_SIZE_LABEL})(?!['\w])")
_SIZE_PREFIXED = re.compile(
    rf"\bsize\s*:?\s*(?P<label>us|it|eu)(?!['A-Za-z])\s*(?P<number>{_SIZE_NUMBER})\b",
    re.IGNORECASE,
)
_SIZE_LINE = re.compile(r"^size\b.*\d", re.IGNORECASE)


@dataclass(frozen=True)
class SizeDetection:
    us: str = ""
    alt: str = ""
    alt_label: str = ""

    @property
    def us_token(self) -> str:
        return f"US {self.us}" if self.us else ""


def scan_size_labels(text: str | None) -> list[tuple[str, str]]:
    """Return ``(label, number)`` pairs in the order they appear in ``text``."""
    if not text:
        return []
    matches = sorted(
        [*_SIZE_PREFIXED.finditer(text), *_LABEL_FIRST.finditer(text), *_NUMBER_FIRST.finditer(text)],
        key=lambda match: (match.start(), -match.end()),
    )
    pairs: list[tuple[str, str]] = []
    consumed_until = -1
    for match in matches:
        if match.start() < consumed_until:
            continue
        consumed_until = match.end()
        label = match.group("label").replace(".", "").upper()
        pairs.append((label, match.group("number")))
    return pairs


def detect_sizes(*texts: str | None) -> SizeDetection:
    """Collect labelled sizes from ``texts``; earlier texts win per label."""
    found: dict[str, str] = {}
    for text in texts:
        for label, number in scan_size_labels(text):
            found.setdefault(label, number)

    alt_label = "IT" if "IT" in found else "EU" if "EU" in found else ""
    return SizeDetection(
        us=found.get("US", ""),
        alt=found.get(alt_label, "") if alt_label else "",
        alt_label=alt_label,
    )


def looks_like_size_line(line: str) -> bool:
    text = line.strip()
    return any(pattern.search(text) for pattern in (_SIZE_LINE, _SIZE_PREFIXED, _LABEL_FIRST, _NUMBER_FIRST))


def strip_size_lines(description: str | None) -> str:
    if not description:
        return ""
    kept = [line for line in description.splitlines() if not looks_like_size_line(line)]
    return "\n".join(kept).strip()


def apply_size(item_name: str, description: str, sizes: SizeDetection) -> tuple[str, str]:
    """Suffix the US size onto ``item_name`` and add an alt-size line if needed."""
    if not sizes.us:
        return item_name, description

    token = sizes.us_token
    if item_name and not item_name.lower().endswith(token.lower()):
        item_name = dedupe_adjacent_words(f"{item_name} {token}")

    if sizes.alt:
        size_line = f"Size: {sizes.alt_label} {sizes.alt} / {token}"
        description = "\n".join(part for part in (strip_size_lines(description), size_line) if part)
    return item_name, description


# Location


def infer_location(
    raw: str | None,
    stores: tuple[StoreLocation, ...] = DEFAULT_STORE_LOCATIONS,
) -> StoreLocation | None:
    """Return the store whose keyword appears earliest in ``raw``."""
    if not raw:
        return None
    lowered = raw.lower()
    best: StoreLocation | None = None
    best_index = -1
    for store in stores:
        index = lowered.find(store.key.lower())
        if index < 0:
            continue
        if best is None or index < best_index:
            best, best_index = store, index
    return best


# Consignment

_CONSIGNMENT_KEYWORDS = re.compile(
    r"\bconsign(?:ment|ing|ed|ee)?\b|\bselling it for\b",
    re.IGNORECASE,
)
_PAYOUT_SPLIT = re.compile(r"\b(\d{1,3})\s*/\s*(\d{1,3})\b")
_PERCENT = re.compile(r"(?<![\d.])(\d{1,3}(?:\.\d+)?)\s*%")


@dataclass(frozen=True)
class ConsignmentDetection:
    is_consignment: bool = False
    payout_pct: Number | None = None
    source: str = "none"


def has_consignment_keyword(raw: str | None) -> bool:
    return bool(raw) and _CONSIGNMENT_KEYWORDS.search(raw) is not None


def find_payout_split(raw: str | None) -> float | None:
    """Return ``A`` from the first ``A/B`` split whose parts add up to 100."""
    if not raw:
        return None
    for match in _PAYOUT_SPLIT.finditer(raw):
        payout, store_cut = int(match.group(1)), int(match.group(2))
        if payout + store_cut == 100:
            return float(payout)
    return None


def find_keyword_percent(raw: str | None, window: int = PAYOUT_KEYWORD_WINDOW) -> float | None:
    """Return the first ``NN%`` within ``window`` characters of a consignment keyword."""
    if not raw:
        return None
    percents = list(_PERCENT.finditer(raw))
    for keyword in _CONSIGNMENT_KEYWORDS.finditer(raw):
        for percent in percents:
            if abs(percent.start() - keyword.start()) <= window:
                return float(percent.group(1))
    return None


def detect_consignment(
    raw: str | None,
    oracle_payout: object = "",
    *,
    default_payout_pct: float = DEFAULT_PAYOUT_PCT,
    keyword_window: int = PAYOUT_KEYWORD_WINDOW,
) -> ConsignmentDetection:
    """Decide whether an item is consigned and resolve the vendor payout percent.

    Raw text is authoritative: an ``A/B`` split wins, then a percent near a
    consignment keyword, then ``default_payout_pct``. The oracle's payout is
    only used when the raw text shows no sign of consignment.
    """
    split = find_payout_split(raw)
    if split is not None:
        payout, source = split, "split"
    elif has_consignment_keyword(raw):
        payout = find_keyword_percent(raw, keyword_window)
        source = "keyword_percent"
        if payout is None:
            payout, source = default_payout_pct, "default"
    else:
        oracle_value = parse_first_number(oracle_payout)
        if oracle_value is None:
            return ConsignmentDetection()
        payout, source = oracle_value, "oracle"

    return ConsignmentDetection(
        is_consignment=True,
        payout_pct=as_number(clamp(payout, 0, 100)),
        source=source,
    )


# Vendor

_VENDOR_LABEL = re.compile(
    r"\bvendor\b\s*[:=\-]?\s*(?P<name>[^,.;:\n]+?)(?=\s+is\s+consigning\b|\s*[,.;\n]|\s*$)",
    re.IGNORECASE,
)
# Up to three capitalized words right before the verb.
_CONSIGNOR = re.compile(r"\b(?P<name>[A-Z][\w'-]*(?:[ \t]+[A-Z][\w'-]*){0,2})\s+(?i:is\s+consigning)\b")
_VENDOR_SHORTHAND = re.compile(r"^consign(?:ment|ed)?\s*[-:]\s*(?P<name>.+)$", re.IGNORECASE)


def extract_vendor(raw: str | None) -> str:
    """Pull a vendor name out of ``vendor: X`` or ``X is consigning`` phrasing."""
    if not raw:
        return ""
    for pattern in (_VENDOR_LABEL, _CONSIGNOR):
        match = pattern.search(raw)
        if match:
            name = match.group("name").strip(" \t-:=")
            if name:
                return name
    return ""


def extract_vendor_shorthand(value: str | None) -> str:
    """Return ``X`` from a ``consignment - X`` style vendor reference."""
    if not value:
        return ""
    match = _VENDOR_SHORTHAND.match(value.strip())
    return match.group("name").strip() if match else ""


# Description

_SIZE_PHRASE = re.compile(r"\b(?:mens|men's|womens|women's)?\s*size\s*\d+(\.\d+)?\b", re.IGNORECASE)
_CONDITION_CLAUSE = re.compile(r"\bcondition\s*:?[^.\n]*\b", re.IGNORECASE)
_BOUGHT_FOR = re.compile(r"\bbought for[^.\n]*\b", re.IGNORECASE)
_SELL_FOR = re.compile(r"\bsell for[^.\n]*\b", re.IGNORECASE)


def strip_exclamations(value: str | None) -> str:
    if not value:
        return ""
    return re.sub(r"\s*!+\.?", ".", value)


def sanitize_description(
    value: str | None,
    *,
    brand: str = "",
    item_name: str = "",
    stores: tuple[StoreLocation, ...] = DEFAULT_STORE_LOCATIONS,
) -> str:
    """Remove text already captured by structured fields."""
    if not value:
        return ""
    cleaned = value
    for literal in (brand.strip(), item_name.strip()):
        if literal:
            cleaned = re.sub(escape_regex(literal), "", cleaned, flags=re.IGNORECASE)

    for pattern in (_SIZE_PHRASE, _CONDITION_CLAUSE, _BOUGHT_FOR, _SELL_FOR):
        cleaned = pattern.sub("", cleaned)
    for store in stores:
        cleaned = re.sub(rf"\b{escape_regex(store.key)}(?: store)?\b", "", cleaned, flags=re.IGNORECASE)

    cleaned = re.sub(r"[ \t]+,", ",", cleaned)
    cleaned = re.sub(r",\s*\.", ".", cleaned)
    cleaned = re.sub(r"^[\s,.-]+", "", cleaned)
    cleaned = re.sub(r"[\s,.-]+$", "", cleaned)
    cleaned = re.sub(r"[ \t]+\n", "\n", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    cleaned = re.sub(r"[ \t]{2,}", " ", cleaned)
    return cleaned.strip()


def strip_banned_words(value: str | None, words: tuple[str, ...] = BANNED_DESCRIPTION_WORDS) -> str:
    if not value:
        return ""
    if not words:
        return value.strip()
    pattern = "|".join(escape_regex(word) for word in words)
    cleaned = re.sub(rf"\b(?:{pattern})\b", "", value, flags=re.IGNORECASE)
    return re.sub(r"[ \t]{2,}", " ", cleaned).strip()


def normalize_description_lines(value: str | None) -> str:
    if not value:
        return ""
    lines = [line.strip() for line in value.replace("\r\n", "\n").split("\n")]
    return "\n".join(line for line in lines if line)


def clean_description(
    value: str | None,
    *,
    brand: str = "",
    item_name: str = "",
    stores: tuple[StoreLocation, ...] = DEFAULT_STORE_LOCATIONS,
    banned_words: tuple[str, ...] = BANNED_DESCRIPTION_WORDS,
) -> str:
    """Run the full description cleanup in order."""
    sanitized = sanitize_description(
        strip_exclamations(value),
        brand=brand,
        item_name=item_name,
        stores=stores,
    )
    return normalize_description_lines(strip_banned_words(sanitized, banned_words))
