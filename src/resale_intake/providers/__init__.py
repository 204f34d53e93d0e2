"""Extraction oracle providers for resale-intake."""

from resale_intake.providers.base import BaseProvider

__all__ = ["BaseProvider"]
