"""Custom exceptions for resale-intake."""


class IntakeError(Exception):
    """Base exception for resale-intake."""

    pass


class NormalizationError(IntakeError):
    """Base exception for failures of the normalization pipeline."""

    pass


class InvalidRawInput(NormalizationError):
    """Raised when raw intake text is empty or not a string."""

    pass


class OracleUnavailable(NormalizationError):
    """Raised when the extraction oracle cannot be reached or configured."""

    retryable = False


class AuthenticationError(OracleUnavailable):
    """Raised when the oracle API key is invalid or missing."""

    pass


class RateLimitError(OracleUnavailable):
    """Raised when the oracle API rate limit is exceeded."""

    retryable = True


class OracleTimeout(OracleUnavailable):
    """Raised when the oracle call exceeds its timeout."""

    retryable = True


class MalformedOracleOutput(NormalizationError):
    """Raised when the oracle response is not parseable JSON."""

    def __init__(self, message: str, content: str = ""):
        super().__init__(message)
        self.content = content


class SchemaViolation(NormalizationError):
    """Raised when the oracle JSON does not match the extraction schema."""

    def __init__(self, message: str, fields: list[str] | None = None, issues: list[dict] | None = None):
        super().__init__(message)
        self.fields = fields or []
        self.issues = issues or []


class RecordPersistenceError(IntakeError):
    """Raised when an intake record cannot be stored."""

    pass


class VendorDirectoryError(IntakeError):
    """Raised when the vendor directory cannot be fetched."""

    pass
