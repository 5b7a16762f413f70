"""
Validation of untrusted request input.

Every function here is pure: it inspects the values it is given and returns a
ValidationResult without touching the store. Rejections list every violation
that could be found so clients can fix their request in one go.
"""

import re
from typing import Any, List, Optional

from library.models import (
    BookCreate, BookUpdate, ValidationErrorCode, ValidationResult
)


class _Missing:
    """Marker for a field that was absent from the request body."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

REQUIRED_FIELDS_ERROR = "Title and author are required fields"
INVALID_ID_FORMAT_ERROR = "Invalid book ID format. ID must be a number."
NOT_POSITIVE_ID_ERROR = "Book ID must be a positive number."
NO_FIELDS_ERROR = "Provide at least one field to update (title or author)."

# Leading ASCII integer, trailing characters ignored
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def _type_error(label: str, value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return f"{label} must be a string"
    return None


def _empty_error(label: str, value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip() == "":
        return f"{label} cannot be empty"
    return None


def validate_create(title: Any = MISSING, author: Any = MISSING) -> ValidationResult:
    """
    Validate the fields of a new book.

    Args:
        title: Raw title from the request body, or MISSING
        author: Raw author from the request body, or MISSING

    Returns:
        ValidationResult carrying a trimmed BookCreate on success
    """
    if title is MISSING or author is MISSING:
        return ValidationResult.reject(
            ValidationErrorCode.MISSING_FIELDS, [REQUIRED_FIELDS_ERROR]
        )

    fields = (("Title", title), ("Author", author))
    errors: List[str] = []
    for check in (_type_error, _empty_error):
        for label, value in fields:
            error = check(label, value)
            if error:
                errors.append(error)

    if errors:
        return ValidationResult.reject(ValidationErrorCode.INVALID_FIELD, errors)

    return ValidationResult.accept(
        BookCreate(title=title.strip(), author=author.strip())
    )


def validate_identifier(raw: Any) -> ValidationResult:
    """
    Parse a path parameter into a positive book id.

    Only the leading run of ASCII digits is read, so "12abc" and "1.5" parse
    as 12 and 1.
    """
    match = _LEADING_INT.match(raw) if isinstance(raw, str) else None
    if match is None:
        return ValidationResult.reject(
            ValidationErrorCode.INVALID_FORMAT, [INVALID_ID_FORMAT_ERROR]
        )

    book_id = int(match.group(1))
    if book_id <= 0:
        return ValidationResult.reject(
            ValidationErrorCode.NOT_POSITIVE, [NOT_POSITIVE_ID_ERROR]
        )

    return ValidationResult.accept(book_id)


def validate_update(title: Any = MISSING, author: Any = MISSING) -> ValidationResult:
    """
    Validate a partial update.

    At least one field must be present. Each present field is checked on its
    own; the first failing check for a field is reported for that field.
    """
    if title is MISSING and author is MISSING:
        return ValidationResult.reject(
            ValidationErrorCode.NO_FIELDS_PROVIDED, [NO_FIELDS_ERROR]
        )

    errors: List[str] = []
    trimmed = {}
    for name, value in (("title", title), ("author", author)):
        if value is MISSING:
            continue
        label = name.capitalize()
        error = _type_error(label, value) or _empty_error(label, value)
        if error:
            errors.append(error)
        else:
            trimmed[name] = value.strip()

    if errors:
        return ValidationResult.reject(ValidationErrorCode.INVALID_FIELD, errors)

    return ValidationResult.accept(BookUpdate(**trimmed))
