# stitch/core/validation.py
# Pure validation logic for request bounds: pagination, id lists, scores & dates (no I/O)

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional

from .exceptions import BadRequestError


# hard ceilings shared by CLI & history store
MAX_PAGE_LIMIT = 100
MAX_BULK_IDS = 20


# * Standard result type for validation operations (pure data, no I/O)
@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _is_int(value: Any) -> bool:
    # bool is an int subclass; reject it explicitly
    return isinstance(value, int) and not isinstance(value, bool)


# * Page number must be a positive integer
def validate_page(page: Any) -> tuple[bool, Optional[str]]:
    if not _is_int(page) or page < 1:
        return False, f"page must be a positive integer, got {page!r}"
    return True, None


# * Page size must be a positive integer no greater than max_limit
def validate_limit(
    limit: Any, max_limit: int = MAX_PAGE_LIMIT
) -> tuple[bool, Optional[str]]:
    if not _is_int(limit) or limit < 1:
        return False, f"limit must be a positive integer, got {limit!r}"
    if limit > max_limit:
        return False, f"limit must be <= {max_limit}, got {limit}"
    return True, None


# * Bulk id lists: non-empty, bounded, each a non-empty string
def validate_id_list(
    ids: Any, max_items: int = MAX_BULK_IDS
) -> tuple[bool, Optional[str]]:
    if not isinstance(ids, (list, tuple)) or len(ids) == 0:
        return False, "ids must be a non-empty list"
    if len(ids) > max_items:
        return False, f"at most {max_items} ids allowed, got {len(ids)}"
    for i, item in enumerate(ids):
        if not isinstance(item, str) or not item.strip():
            return False, f"ids[{i}] must be a non-empty string"
    return True, None


# * Scores are fractions in [0, 1]
def validate_score(value: Any) -> tuple[bool, Optional[str]]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False, f"score must be a number, got {type(value).__name__}"
    if not 0.0 <= value <= 1.0:
        return False, f"score must be between 0 and 1, got {value}"
    return True, None


# * Parse an ISO-8601 date or datetime; trailing 'Z' accepted (returns None if invalid)
def parse_iso_date(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def validate_iso_date(value: Any) -> tuple[bool, Optional[str]]:
    if parse_iso_date(value) is None:
        return False, f"invalid ISO-8601 date: {value!r}"
    return True, None


# * date_from must not be after date_to; both optional
def validate_date_range(
    date_from: Any, date_to: Any
) -> tuple[bool, Optional[str]]:
    if date_from is None or date_to is None:
        return True, None
    start = parse_iso_date(date_from)
    end = parse_iso_date(date_to)
    if start is None or end is None:
        return False, "date range contains an invalid date"
    # compare naive & aware values on a common footing
    if (start.tzinfo is None) != (end.tzinfo is None):
        start = start.replace(tzinfo=None)
        end = end.replace(tzinfo=None)
    if start > end:
        return False, f"date_from ({date_from}) is after date_to ({date_to})"
    return True, None


# * Aggregate checks for a history listing query
def validate_history_query(
    page: Any = 1,
    limit: Any = 20,
    date_from: Any = None,
    date_to: Any = None,
) -> ValidationResult:
    errors: List[str] = []

    for ok, err in (validate_page(page), validate_limit(limit)):
        if not ok and err:
            errors.append(err)

    for label, value in (("date_from", date_from), ("date_to", date_to)):
        if value is not None:
            ok, err = validate_iso_date(value)
            if not ok and err:
                errors.append(f"{label}: {err}")

    if not errors:
        ok, err = validate_date_range(date_from, date_to)
        if not ok and err:
            errors.append(err)

    return ValidationResult(is_valid=not errors, errors=errors)


# * Raise BadRequestError for an invalid result
def raise_for_result(result: ValidationResult) -> None:
    if not result.is_valid:
        raise BadRequestError(
            "Invalid request parameters",
            {"validationErrors": list(result.errors)},
        )
