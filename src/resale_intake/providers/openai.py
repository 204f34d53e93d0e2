"""OpenAI provider implementation."""

import os

import openai
from openai import OpenAI

from resale_intake.config import OracleSettings
from resale_intake.exceptions import AuthenticationError, OracleTimeout, OracleUnavailable, RateLimitError
from resale_intake.prompt import ExtractionRequest
from resale_intake.providers.base import BaseProvider


class OpenAIProvider(BaseProvider):
    """OpenAI chat completions provider in JSON mode."""

    def __init__(
        self,
        api_key: str | None = None,
        settings: OracleSettings | None = None,
        client=None,
    ):
        self.settings = settings or OracleSettings.from_env("openai")
        if client is not None:
            self.client = client
            return

        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        # Retries are left to the caller; one oracle call per normalization.
        self.client = OpenAI(api_key=self.api_key, timeout=self.settings.timeout_sec, max_retries=0)

    def complete(self, request: ExtractionRequest) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=request.model,
                temperature=request.temperature,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": request.system_instruction},
                    {"role": "user", "content": request.prompt},
                ],
            )
        except openai.APITimeoutError as e:
            raise OracleTimeout(f"OpenAI request timed out: {e}") from e
        except openai.RateLimitError as e:
            raise RateLimitError(f"API rate limit exceeded: {e}") from e
        except openai.AuthenticationError as e:
            raise AuthenticationError(f"Invalid API key: {e}") from e
        except openai.APIError as e:
            raise OracleUnavailable(f"OpenAI request failed: {e}") from e

        if not completion.choices:
            return ""
        return (completion.choices[0].message.content or "").strip()

    def get_extraction_metadata(self) -> dict[str, str]:
        return {"provider": "openai", "model": self.settings.model}
