"""Base provider interface."""

from abc import ABC, abstractmethod

from resale_intake.prompt import ExtractionRequest


class BaseProvider(ABC):
    """Abstract base class for extraction oracle providers."""

    @abstractmethod
    def complete(self, request: ExtractionRequest) -> str:
        """Send an extraction request and return the raw response text.

        Args:
            request: Prompt, system instruction and model settings.

        Returns:
            Response text, expected to be a JSON object.
        """
        pass

    def get_extraction_metadata(self) -> dict[str, str]:
        """Return provider-specific extraction metadata."""
        return {}
