"""Environment-driven configuration for resale-intake."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PROVIDER = "gemini"
DEFAULT_MODELS = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
}


def env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    return value if value not in (None, "") else default


def safe_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def safe_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class OracleSettings:
    """Fixed settings for calling the extraction oracle.

    Temperature is pinned to 0 so repeated calls stay deterministic; it is not
    read from the environment.
    """

    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODELS[DEFAULT_PROVIDER]
    temperature: float = 0.0
    timeout_sec: float = 30.0

    @classmethod
    def from_env(cls, provider: str | None = None) -> "OracleSettings":
        name = (provider or env("INTAKE_PROVIDER", DEFAULT_PROVIDER)).strip().lower()
        default_model = DEFAULT_MODELS.get(name, DEFAULT_MODELS[DEFAULT_PROVIDER])
        return cls(
            provider=name,
            model=env("INTAKE_ORACLE_MODEL", default_model),
            timeout_sec=max(1.0, safe_float(env("INTAKE_ORACLE_TIMEOUT_SEC"), 30.0)),
        )
