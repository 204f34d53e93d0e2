"""Vendor directory backed by a Google Sheets web app."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol
from urllib import error, parse, request

from resale_intake.config import env, safe_float
from resale_intake.exceptions import VendorDirectoryError

logger = logging.getLogger(__name__)


def _norm(value: object) -> str:
    return str(value or "").strip().lower()


def best_vendor_match(vendors: list[str], query: str | None) -> str | None:
    """Return the vendor that best matches ``query``.

    Exact case-insensitive match wins, then substring containment, then a
    vendor containing the query's last word.
    """
    normalized_query = _norm(query)
    if not normalized_query:
        return None
    for vendor in vendors:
        if _norm(vendor) == normalized_query:
            return vendor
    for vendor in vendors:
        if normalized_query in _norm(vendor):
            return vendor
    last_token = normalized_query.split()[-1]
    for vendor in vendors:
        if last_token in _norm(vendor).split():
            return vendor
    return None


class TTLCache:
    """Single-value cache that expires ``ttl_sec`` seconds after it is set."""

    def __init__(self, ttl_sec: float = 600.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_sec = ttl_sec
        self._clock = clock
        self._value = None
        self._stored_at: float | None = None

    def get(self):
        if self._stored_at is None or self._clock() - self._stored_at > self.ttl_sec:
            return None
        return self._value

    def set(self, value) -> None:
        self._value = value
        self._stored_at = self._clock()

    def clear(self) -> None:
        self._value = None
        self._stored_at = None


class VendorSource(Protocol):
    def fetch(self) -> list[str]: ...


@dataclass(frozen=True)
class VendorDirectoryConfig:
    webapp_url: str | None = None
    webapp_key: str | None = None
    cache_ttl_sec: float = 600.0
    timeout_sec: float = 5.0

    @classmethod
    def from_env(cls) -> "VendorDirectoryConfig":
        return cls(
            webapp_url=env("VENDOR_SHEETS_WEBAPP_URL"),
            webapp_key=env("VENDOR_SHEETS_WEBAPP_KEY"),
            cache_ttl_sec=safe_float(env("VENDOR_CACHE_TTL_SEC"), 600.0),
            timeout_sec=safe_float(env("VENDOR_SHEETS_TIMEOUT_SEC"), 5.0),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.webapp_url and self.webapp_key)


class SheetsVendorSource:
    """Fetches the vendor list from a Sheets web app returning ``{"vendors": [...]}``."""

    def __init__(self, config: VendorDirectoryConfig):
        self.config = config

    def fetch(self) -> list[str]:
        if not self.config.is_configured:
            raise VendorDirectoryError("Missing VENDOR_SHEETS_WEBAPP_URL or VENDOR_SHEETS_WEBAPP_KEY")

        query = parse.urlencode({"key": self.config.webapp_key})
        req = request.Request(f"{self.config.webapp_url}?{query}", headers={"Accept": "application/json"})
        try:
            with request.urlopen(req, timeout=self.config.timeout_sec) as response:
                body = response.read().decode("utf-8")
        except error.HTTPError as exc:
            raise VendorDirectoryError(f"Sheets webapp error: {exc.code}") from exc
        except (error.URLError, TimeoutError, ValueError) as exc:
            raise VendorDirectoryError(f"Unable to reach Sheets webapp: {exc}") from exc

        try:
            data = json.loads(body)
        except json.JSONDecodeError as exc:
            raise VendorDirectoryError("Sheets webapp returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise VendorDirectoryError("Sheets webapp returned an unexpected payload")
        if data.get("error"):
            raise VendorDirectoryError(f"Sheets webapp error: {data['error']}")

        vendors = data.get("vendors")
        if not isinstance(vendors, list):
            return []
        return [str(vendor).strip() for vendor in vendors if str(vendor).strip()]


class VendorDirectory:
    """Looks up canonical vendor names through a cached vendor source."""

    def __init__(self, source: VendorSource, cache: TTLCache | None = None):
        self.source = source
        self.cache = cache or TTLCache()

    @classmethod
    def from_env(cls) -> "VendorDirectory | None":
        config = VendorDirectoryConfig.from_env()
        if not config.is_configured:
            return None
        return cls(SheetsVendorSource(config), TTLCache(ttl_sec=config.cache_ttl_sec))

    def vendors(self) -> list[str]:
        cached = self.cache.get()
        if cached:
            return cached
        vendors = self.source.fetch()
        logger.info("loaded %d vendors", len(vendors))
        self.cache.set(vendors)
        return vendors

    def lookup(self, query: str) -> str | None:
        return best_vendor_match(self.vendors(), query)

    def list_vendors(self, limit: int = 50) -> list[str]:
        return self.vendors()[:limit]
