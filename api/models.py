"""
API response models for the FastAPI application.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from library.models import Book, DeletedBook


CREATE_EXAMPLE = {
    "title": "The Great Gatsby",
    "author": "F. Scott Fitzgerald",
}

UPDATE_EXAMPLE = {
    "title": "Updated Title",
    "author": "Updated Author",
}


class APIResponse(BaseModel):
    """Fields shared by every JSON response."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(True, description="Whether the request succeeded")


class BookResponse(APIResponse):
    """Single book payload."""
    data: Book = Field(..., description="Requested book")


class BookListResponse(APIResponse):
    """All books in the collection."""
    count: int = Field(..., description="Number of books returned")
    data: List[Book] = Field(..., description="Books in collection order")


class BookCreatedResponse(APIResponse):
    """Response for a newly created book."""
    message: str = Field("Book created successfully")
    data: Book


class BookUpdatedResponse(APIResponse):
    """Response for an updated book."""
    message: str = Field("Book updated successfully")
    updated_fields: List[str] = Field(..., alias="updatedFields", description="Fields changed by the update")
    data: Book


class BookDeletedResponse(APIResponse):
    """Response for a single deleted book."""
    message: str = Field("Book deleted successfully")
    data: DeletedBook


class BooksClearedResponse(APIResponse):
    """Response for a bulk delete; ``data`` is the pre-deletion snapshot."""
    message: str = Field("All books deleted successfully")
    count: int
    data: List[Book]


class SearchResponse(APIResponse):
    """Search results."""
    query: str = Field(..., description="Query as received in the path")
    count: int
    data: List[Book]


class ErrorResponse(APIResponse):
    """Error response model."""
    success: bool = False
    error: Optional[str] = Field(None, description="Error message")
    errors: Optional[List[str]] = Field(None, description="Every validation error found")
    example: Optional[Dict[str, Any]] = Field(None, description="Example of a valid request body")


class RouteNotFoundResponse(ErrorResponse):
    """Returned for unmatched routes, with the endpoint catalog."""
    message: str
    available_endpoints: Dict[str, str] = Field(..., alias="availableEndpoints")


class InternalErrorResponse(ErrorResponse):
    """Returned when an unexpected fault escapes a handler."""
    message: str
    timestamp: str


class APIInfoResponse(BaseModel):
    """Root endpoint metadata."""
    name: str
    version: str
    description: str
    endpoints: Dict[str, str]
    documentation: str
    server: str
