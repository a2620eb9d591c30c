# stitch/core/errors.py
# JSON error envelope, PII redaction & request-data guards shared by the CLI & services

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from .exceptions import (
    APIError,
    BadRequestError,
    ForbiddenError,
    InternalServerError,
)
from .verbose import vlog

T = TypeVar("T")


# * PII patterns, applied in order; later patterns see earlier replacements
_PII_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"), "[redacted-email]"),
    (re.compile(r"\b\d{3}-\d{2}-\d{4}\b"), "[redacted-ssn]"),
    (re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b"), "[redacted-card]"),
    (re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b"), "[redacted-ip]"),
    (
        re.compile(r"\+?\d{1,3}?[\s.-]?\(?\d{2,4}\)?[\s.-]?\d{3,4}[\s.-]?\d{3,4}"),
        "[redacted-phone]",
    ),
    (
        re.compile(
            r"\b\d{1,5}\s+([A-Za-z]+\s?){1,4}"
            r"(Street|St|Avenue|Ave|Road|Rd|Blvd|Lane|Ln|Drive|Dr)\b",
            re.IGNORECASE,
        ),
        "[redacted-address]",
    ),
]

_TOKEN_RE = re.compile(r"\b[A-Za-z0-9_-]{32,}\b")
_DATABASE_URL_RE = re.compile(r"postgres(?:ql)?://[^\s]+")
_ABS_PATH_RE = re.compile(r"/[a-zA-Z0-9_\-/\.]+")


def _redact_token(match: re.Match[str]) -> str:
    token = match.group(0)
    # long plain words are not secrets
    if token.isalpha() and len(token) < 40:
        return token
    return "[redacted-token]"


# * Replace emails, phones, addresses, SSNs, cards, tokens & IPs w/ markers
def redact_pii(text: str) -> str:
    if not text:
        return text
    redacted = text
    for pattern, marker in _PII_PATTERNS:
        redacted = pattern.sub(marker, redacted)
    return _TOKEN_RE.sub(_redact_token, redacted)


# * Strip PII, database URLs &, in production, filesystem paths
def sanitize_error_message(message: str, production: bool = False) -> str:
    sanitized = redact_pii(str(message))
    sanitized = _DATABASE_URL_RE.sub("[DATABASE_URL_REDACTED]", sanitized)
    if production:
        sanitized = _ABS_PATH_RE.sub("[PATH_REDACTED]", sanitized)
    return sanitized


def _sanitize_value(value: Any, production: bool) -> Any:
    if isinstance(value, str):
        return sanitize_error_message(value, production)
    if isinstance(value, dict):
        return sanitize_error_details(value, production)
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(item, production) for item in value]
    return value


# * Recursively sanitize strings in a details mapping, including inside lists
def sanitize_error_details(
    details: Optional[Dict[str, Any]], production: bool = False
) -> Optional[Dict[str, Any]]:
    if details is None:
        return None
    return {key: _sanitize_value(value, production) for key, value in details.items()}


# * Standardized error envelope
@dataclass
class ErrorResponse:
    error: str
    message: str
    status_code: int
    timestamp: str
    request_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    # wire form w/ camelCase keys; absent optionals omitted
    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "error": self.error,
            "message": self.message,
            "statusCode": self.status_code,
            "timestamp": self.timestamp,
        }
        if self.request_id:
            body["requestId"] = self.request_id
        if self.details:
            body["details"] = self.details
        return body


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _infer_status(error: BaseException) -> int:
    name = type(error).__name__
    text = str(error).lower()
    if name == "ValidationError":
        return 400
    if "Unauthorized" in name or "unauthorized" in text:
        return 401
    if "Forbidden" in name or "forbidden" in text:
        return 403
    if "NotFound" in name or "not found" in text:
        return 404
    return 500


# * Build the envelope for any raised value
def format_error_response(
    error: Any,
    request_id: Optional[str] = None,
    production: bool = False,
) -> ErrorResponse:
    timestamp = _now_iso()

    if isinstance(error, APIError):
        return ErrorResponse(
            error=error.code or type(error).__name__,
            message=sanitize_error_message(error.message, production),
            status_code=error.status_code,
            timestamp=timestamp,
            request_id=request_id,
            details=sanitize_error_details(error.details, production),
        )

    if isinstance(error, BaseException):
        return ErrorResponse(
            error=type(error).__name__,
            message=sanitize_error_message(str(error), production),
            status_code=_infer_status(error),
            timestamp=timestamp,
            request_id=request_id,
        )

    return ErrorResponse(
        error="UnknownError",
        message="An unknown error occurred",
        status_code=500,
        timestamp=timestamp,
        request_id=request_id,
    )


# * Format, log & return the envelope for an error
def handle_error(
    error: Any, context: Optional[Dict[str, Any]] = None
) -> ErrorResponse:
    context = context or {}
    production = context.get("environment") == "production"
    response = format_error_response(error, context.get("request_id"), production)

    extra = {k: v for k, v in context.items() if k not in ("environment",)}
    detail_parts = [f"status={response.status_code}"]
    detail_parts.extend(
        f"{k}={sanitize_error_message(str(v), production)}" for k, v in extra.items()
    )
    vlog("ERROR", f"{response.error}: {response.message}", ", ".join(detail_parts))
    return response


# * Await an operation, wrapping non-API failures in InternalServerError
async def try_catch(operation: Callable[[], Awaitable[T]], error_message: str) -> T:
    try:
        return await operation()
    except APIError:
        raise
    except Exception as e:
        raise InternalServerError(error_message, {"originalError": str(e)}) from e


# * Require non-empty values for the given fields
def validate_required(data: Dict[str, Any], fields: List[str]) -> None:
    missing = [f for f in fields if not data.get(f)]
    if missing:
        raise BadRequestError(
            f"Missing required fields: {', '.join(missing)}",
            {"missingFields": missing},
        )


_TYPE_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "object": lambda v: isinstance(v, dict),
    "array": lambda v: isinstance(v, list),
}


# * Check declared field types; None & missing values are skipped
def validate_types(data: Dict[str, Any], schema: Dict[str, str]) -> None:
    errors: List[str] = []
    for field_name, expected in schema.items():
        value = data.get(field_name)
        if value is None:
            continue
        check = _TYPE_CHECKS.get(expected)
        if check is None:
            raise ValueError(f"Unknown type in schema: {expected}")
        if not check(value):
            actual = "array" if isinstance(value, list) else type(value).__name__
            errors.append(f"{field_name} must be {expected}, got {actual}")

    if errors:
        raise BadRequestError("Invalid field types", {"validationErrors": errors})


# * Ensure the current user owns the resource
def assert_ownership(
    resource_user_id: str,
    current_user_id: str,
    resource_type: str = "resource",
) -> None:
    if resource_user_id != current_user_id:
        raise ForbiddenError(f"You do not have permission to access this {resource_type}")
