"""
Pydantic models for book records and validation results.
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.types import PositiveInt


class Book(BaseModel):
    """A stored book record."""
    model_config = ConfigDict(populate_by_name=True)

    id: PositiveInt = Field(..., description="Unique book identifier")
    title: str = Field(..., min_length=1, description="Book title")
    author: str = Field(..., min_length=1, description="Book author")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: datetime = Field(..., alias="updatedAt", description="Last update timestamp")


class BookCreate(BaseModel):
    """Trimmed fields accepted for a new book."""
    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)


class BookUpdate(BaseModel):
    """Trimmed fields to apply to an existing book; None means unchanged."""
    title: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, min_length=1)

    def present_fields(self) -> List[str]:
        return [name for name in ("title", "author") if getattr(self, name) is not None]


class DeletedBook(BaseModel):
    """Snapshot of a removed book."""
    id: PositiveInt
    title: str
    author: str


class ValidationErrorCode(str, Enum):
    """Reason a validation was rejected."""
    MISSING_FIELDS = "missing_fields"
    INVALID_FIELD = "invalid_field"
    INVALID_FORMAT = "invalid_format"
    NOT_POSITIVE = "not_positive"
    NO_FIELDS_PROVIDED = "no_fields_provided"


class ValidationResult(BaseModel):
    """
    Outcome of validating untrusted request input.

    On success ``value`` carries the parsed payload (an id, BookCreate or
    BookUpdate). On rejection ``code`` tags the failure and ``errors`` lists
    every violation found.
    """
    valid: bool
    errors: List[str] = Field(default_factory=list)
    code: Optional[ValidationErrorCode] = None
    value: Optional[Any] = None

    @classmethod
    def accept(cls, value: Any) -> "ValidationResult":
        return cls(valid=True, value=value)

    @classmethod
    def reject(cls, code: ValidationErrorCode, errors: List[str]) -> "ValidationResult":
        return cls(valid=False, code=code, errors=errors)
