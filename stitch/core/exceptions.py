# stitch/core/exceptions.py
# Custom exception hierarchy for Stitch (pure - no I/O operations)

from pathlib import Path
from typing import Any, Dict, List, Optional


# * Format error message for display (pure string formatting, no I/O)
def format_error_message(error_type: str, message: str) -> str:
    return f"[red]{error_type}:[/] {message}"


# * Base exception for Stitch application
class StitchError(Exception):
    pass


# =============================================================================
# HTTP-status-tagged errors (shared w/ the JSON error envelope)
# =============================================================================


# * Error carrying an HTTP status, machine-readable code & optional structured detail
class APIError(StitchError):
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.message!r}, "
            f"status_code={self.status_code!r}, code={self.code!r})"
        )


# * 400 - malformed or out-of-bounds input
class BadRequestError(APIError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 400, "BAD_REQUEST", details)


# * 401 - caller not authenticated
class UnauthorizedError(APIError):
    def __init__(
        self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, 401, "UNAUTHORIZED", details)


# * 403 - caller may not touch this resource
class ForbiddenError(APIError):
    def __init__(
        self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, 403, "FORBIDDEN", details)


# * 404 - named resource does not exist
class NotFoundError(APIError):
    def __init__(self, resource: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"{resource} not found", 404, "NOT_FOUND", details)
        self.resource = resource


# * 409 - state conflict
class ConflictError(APIError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 409, "CONFLICT", details)


# * 422 - well-formed but semantically invalid
class UnprocessableEntityError(APIError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 422, "UNPROCESSABLE_ENTITY", details)


# * 429 - caller is over its request budget
class TooManyRequestsError(APIError):
    def __init__(
        self,
        message: str = "Too many requests",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, 429, "TOO_MANY_REQUESTS", details)


# * 500 - unexpected failure
class InternalServerError(APIError):
    def __init__(
        self,
        message: str = "Internal server error",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, 500, "INTERNAL_SERVER_ERROR", details)


# * 503 - dependency unavailable
class ServiceUnavailableError(APIError):
    def __init__(
        self,
        message: str = "Service unavailable",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, 503, "SERVICE_UNAVAILABLE", details)


# =============================================================================
# Validation
# =============================================================================


# * Validation-specific error for handling warnings & recoverable errors w/ context
class ValidationError(StitchError):
    def __init__(self, warnings: List[str], recoverable: bool = True):
        self.warnings = warnings
        self.recoverable = recoverable
        details = "; ".join(warnings) if warnings else "no details"
        message = f"Validation failed with {len(warnings)} warnings: {details}"
        super().__init__(message)


# =============================================================================
# Request queue
# =============================================================================


# * Base error for the AI request queue
class QueueError(StitchError):
    pass


# * Queued call did not settle before its timeout
class QueueTimeoutError(QueueError):
    def __init__(self, request_id: str, timeout_ms: int):
        super().__init__(f"Request timeout after {timeout_ms}ms")
        self.request_id = request_id
        self.timeout_ms = timeout_ms

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.args[0]!r}, "
            f"request_id={self.request_id!r}, timeout_ms={self.timeout_ms!r})"
        )


# * Pending item discarded by AIRequestQueue.clear()
class QueueClearedError(QueueError):
    def __init__(self, message: str = "Queue cleared"):
        super().__init__(message)


# =============================================================================
# Field paths & modifications
# =============================================================================


# * Base error for field path parsing & resolution
class FieldPathError(StitchError):
    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, path={self.path!r})"


# * Field path could not be parsed
class FieldPathSyntaxError(FieldPathError):
    pass


# * Array index out of bounds on write
class FieldPathIndexError(FieldPathError):
    def __init__(self, message: str, path: str = "", index: int = 0):
        super().__init__(message, path)
        self.index = index

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.args[0]!r}, "
            f"path={self.path!r}, index={self.index!r})"
        )


# * Modification could not be applied
class ModificationError(StitchError):
    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.args[0]!r}, operation={self.operation!r})"
        )


# * Keyword scoring could not run (e.g., empty job description)
class ScoringError(StitchError):
    pass


# * Base error for modification history
class HistoryError(StitchError):
    pass


# * History record id not found
class HistoryRecordNotFoundError(NotFoundError, HistoryError):
    def __init__(self, record_id: str):
        super().__init__("Modification", {"id": record_id})
        self.record_id = record_id


# =============================================================================
# AI providers
# =============================================================================


# * AI-related exceptions
class AIError(StitchError):
    pass


# * Provider-specific error (API errors, rate limits)
class ProviderError(AIError):
    def __init__(self, message: str, provider: str):
        super().__init__(message)
        self.provider = provider

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.args[0]!r}, provider={self.provider!r})"
        )


# * API rate limit exceeded
class RateLimitError(ProviderError):
    def __init__(self, message: str, provider: str, retry_after: int | None = None):
        super().__init__(message, provider)
        self.retry_after = retry_after

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.args[0]!r}, "
            f"provider={self.provider!r}, retry_after={self.retry_after!r})"
        )


# =============================================================================
# Configuration & files
# =============================================================================


# * Configuration errors
class ConfigurationError(StitchError):
    pass


# * Settings value validation failed
class SettingsValidationError(ConfigurationError):
    def __init__(self, message: str, setting_name: str, value: Any):
        super().__init__(message)
        self.setting_name = setting_name
        self.value = value

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.args[0]!r}, "
            f"setting_name={self.setting_name!r}, value={self.value!r})"
        )


# * JSON parsing errors
class JSONParsingError(StitchError):
    pass


# * Base error for document export
class DocumentError(StitchError):
    pass


# * Base error for file I/O operations
class FileOperationError(StitchError):
    def __init__(self, message: str, path: Path | str):
        super().__init__(message)
        self.path = Path(path) if isinstance(path, str) else path

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, path={self.path!r})"


# * Failed to read file
class FileReadError(FileOperationError):
    pass


# * Failed to write file
class FileWriteError(FileOperationError):
    pass
