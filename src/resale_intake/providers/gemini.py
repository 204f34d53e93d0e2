"""Gemini provider implementation."""

import os

import httpx
from google import genai
from google.genai import errors, types

from resale_intake.config import OracleSettings
from resale_intake.exceptions import AuthenticationError, OracleTimeout, OracleUnavailable, RateLimitError
from resale_intake.prompt import ExtractionRequest
from resale_intake.providers.base import BaseProvider


class GeminiProvider(BaseProvider):
    """Gemini API provider."""

    def __init__(
        self,
        api_key: str | None = None,
        settings: OracleSettings | None = None,
        client=None,
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
            settings: Model and timeout settings.
            client: Pre-built ``genai.Client``; skips key lookup when given.

        Raises:
            AuthenticationError: If no API key is provided or found.
        """
        self.settings = settings or OracleSettings.from_env("gemini")
        if client is not None:
            self.client = client
            return

        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.client = genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(timeout=int(self.settings.timeout_sec * 1000)),
        )

    def complete(self, request: ExtractionRequest) -> str:
        """Ask Gemini for a JSON extraction.

        Raises:
            OracleTimeout: If the request times out
            RateLimitError: If API rate limit is exceeded
            AuthenticationError: If API key is invalid
            OracleUnavailable: For any other API or network failure
        """
        try:
            response = self.client.models.generate_content(
                model=request.model,
                contents=[request.prompt],
                config=types.GenerateContentConfig(
                    system_instruction=request.system_instruction,
                    temperature=request.temperature,
                    response_mime_type="application/json",
                ),
            )
        except httpx.TimeoutException as e:
            raise OracleTimeout(f"Gemini request timed out: {e}") from e
        except errors.ClientError as e:
            message = str(e).lower()
            if e.code == 429 or "rate" in message or "quota" in message:
                raise RateLimitError(f"API rate limit exceeded: {e}") from e
            if e.code in (401, 403) or "api key" in message:
                raise AuthenticationError(f"Invalid API key: {e}") from e
            raise OracleUnavailable(f"Gemini request failed: {e}") from e
        except (errors.APIError, httpx.HTTPError) as e:
            raise OracleUnavailable(f"Gemini request failed: {e}") from e

        return (response.text or "").strip()

    def get_extraction_metadata(self) -> dict[str, str]:
        return {"provider": "gemini", "model": self.settings.model}
