"""Validation of raw oracle responses."""

from __future__ import annotations

import json

from pydantic import ValidationError

from resale_intake.exceptions import MalformedOracleOutput, SchemaViolation
from resale_intake.schema import ExtractionResult


def parse_extraction_response(content: str | None) -> ExtractionResult:
    """Parse oracle text into an ExtractionResult.

    JSON syntax is checked first; the strict schema only runs on parsed JSON.

    Raises:
        MalformedOracleOutput: If the text is not valid JSON.
        SchemaViolation: If the JSON is not an object or does not match the schema.
    """
    text = (content or "").strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedOracleOutput("Oracle response was not valid JSON", content=text) from exc

    if not isinstance(data, dict):
        raise SchemaViolation(
            "Oracle response must be a JSON object",
            fields=["$root"],
            issues=[{"loc": [], "msg": "Input should be an object", "type": "model_type"}],
        )

    try:
        return ExtractionResult.model_validate(data)
    except ValidationError as exc:
        issues = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors(include_url=False)
        ]
        fields = sorted({str(issue["loc"][0]) for issue in issues if issue["loc"]})
        raise SchemaViolation(
            f"Oracle output validation failed: {', '.join(fields)}",
            fields=fields,
            issues=issues,
        ) from exc
