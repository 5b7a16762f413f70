"""
FastAPI main application for the Book Management API.
"""

import json
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import (
    CREATE_EXAMPLE, UPDATE_EXAMPLE,
    APIInfoResponse, BookCreatedResponse, BookDeletedResponse,
    BookListResponse, BookResponse, BooksClearedResponse, BookUpdatedResponse,
    ErrorResponse, InternalErrorResponse, RouteNotFoundResponse, SearchResponse
)
from library.exceptions import BadRequestError, BookNotFoundError, LibraryError
from library.models import ValidationErrorCode
from library.store import BookStore
from library.validator import (
    MISSING, validate_create, validate_identifier, validate_update
)
from utilities.config import ServiceConfig, config
from utilities.logger import RequestLogger

# Setup logging
logger = structlog.get_logger(__name__)

ENDPOINTS = {
    "GET /": "API information",
    "GET /books": "Get all books",
    "GET /books/:id": "Get a specific book",
    "GET /books/search/:query": "Search books by title or author",
    "POST /books": "Create a new book",
    "PUT /books/:id": "Update a book",
    "DELETE /books/:id": "Delete a specific book",
    "DELETE /books": "Delete all books",
}

ENDPOINT_HINTS = {
    "GET /": "API information",
    "GET /books": "Get all books",
    "GET /books/:id": "Get a specific book (replace :id with number)",
    "GET /books/search/:query": "Search books (replace :query with search term)",
    "POST /books": "Create a new book (send JSON with title and author)",
    "PUT /books/:id": "Update a book (send JSON with fields to update)",
    "DELETE /books/:id": "Delete a specific book",
    "DELETE /books": "Delete all books",
}


def _render(model, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=model.model_dump(mode="json", by_alias=True, exclude_none=True)
    )


def get_book_store(request: Request) -> BookStore:
    """Dependency returning the store owned by the running application."""
    return request.app.state.book_store


def parse_book_id(raw: str) -> int:
    """Validate a path identifier or raise BadRequestError."""
    result = validate_identifier(raw)
    if not result.valid:
        raise BadRequestError(result.errors[0])
    return result.value


async def read_json_object(request: Request) -> Dict[str, Any]:
    """
    Parse the request body as a JSON object.

    An empty body reads as an empty object. Malformed JSON or any other JSON
    value raises BadRequestError.
    """
    body = await request.body()
    if not body.strip():
        return {}

    try:
        payload = json.loads(body)
    except ValueError as e:
        raise BadRequestError("Invalid request body", errors=[f"Malformed JSON: {e}"])

    if not isinstance(payload, dict):
        raise BadRequestError(
            "Invalid request body", errors=["Request body must be a JSON object"]
        )
    return payload


def create_app(store: Optional[BookStore] = None, settings: Optional[ServiceConfig] = None) -> FastAPI:
    """
    Build the API application around a book store.

    Args:
        store: Store to serve; a new empty one is created when omitted
        settings: Service configuration; defaults to the environment config
    """
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info(
            "Starting Book Management API",
            server=settings.get_base_url(),
            books=app.state.book_store.count
        )
        yield
        logger.info("Shutting down Book Management API")

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan
    )
    app.state.book_store = store if store is not None else BookStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        events = RequestLogger("api").bind_context(
            method=request.method,
            path=request.url.path
        )
        request.state.events = events
        started = time.perf_counter()
        response = await call_next(request)
        events.log_request(
            response.status_code,
            (time.perf_counter() - started) * 1000
        )
        return response

    # Exception handlers
    @app.exception_handler(LibraryError)
    async def library_exception_handler(request: Request, exc: LibraryError):
        """Handle client-facing domain errors."""
        return _render(
            ErrorResponse(error=exc.message, errors=exc.errors, example=exc.example),
            status_code=exc.status_code
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Unmatched routes and methods answer with the endpoint catalog."""
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            logger.warning("Route not found", method=request.method, path=request.url.path)
            return _render(
                RouteNotFoundResponse(
                    error="Route not found",
                    message=f"Cannot {request.method} {request.url.path}",
                    available_endpoints=ENDPOINT_HINTS
                ),
                status_code=status.HTTP_404_NOT_FOUND
            )
        return _render(ErrorResponse(error=str(exc.detail)), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            method=request.method,
            path=request.url.path,
            exc_info=exc
        )
        return _render(
            InternalErrorResponse(
                error="Internal server error",
                message=str(exc) if settings.debug else "An unexpected error occurred",
                timestamp=datetime.now(timezone.utc).isoformat()
            ),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    @app.get("/", response_model=APIInfoResponse, tags=["Info"])
    async def api_info():
        """API metadata and endpoint catalog."""
        base_url = settings.get_base_url()
        return APIInfoResponse(
            name=settings.api_title,
            version=settings.api_version,
            description=settings.api_description,
            endpoints=ENDPOINTS,
            documentation=f"Send requests to {base_url}/books",
            server=base_url
        )

    # Books endpoints
    @app.get("/books", response_model=BookListResponse, tags=["Books"])
    async def get_books(store: BookStore = Depends(get_book_store)):
        """Get every book in collection order."""
        books = store.list_all()
        return _render(BookListResponse(count=len(books), data=books))

    @app.get("/books/search/{query}", response_model=SearchResponse, tags=["Books"])
    async def search_books(query: str, store: BookStore = Depends(get_book_store)):
        """
        Search books by title or author.

        - **query**: Case-insensitive substring to look for
        """
        results = store.search(query)
        return _render(SearchResponse(query=query, count=len(results), data=results))

    @app.get("/books/{book_id}", response_model=BookResponse, tags=["Books"])
    async def get_book(book_id: str, store: BookStore = Depends(get_book_store)):
        """
        Get a single book by ID.

        - **book_id**: Positive integer identifier
        """
        parsed_id = parse_book_id(book_id)
        found = store.find_by_id(parsed_id)
        if not found:
            raise BookNotFoundError(parsed_id)

        book, _ = found
        return _render(BookResponse(data=book))

    @app.post(
        "/books",
        response_model=BookCreatedResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["Books"]
    )
    async def create_book(request: Request, store: BookStore = Depends(get_book_store)):
        """Add a new book from ``{"title": ..., "author": ...}``."""
        payload = await read_json_object(request)
        result = validate_create(
            payload.get("title", MISSING),
            payload.get("author", MISSING)
        )
        if not result.valid:
            request.state.events.log_validation_failed("create", result.errors)
            raise BadRequestError(
                "Invalid book data", errors=result.errors, example=CREATE_EXAMPLE
            )

        book = store.insert(result.value.title, result.value.author)
        return _render(BookCreatedResponse(data=book), status_code=status.HTTP_201_CREATED)

    @app.put("/books/{book_id}", response_model=BookUpdatedResponse, tags=["Books"])
    async def update_book(
        book_id: str,
        request: Request,
        store: BookStore = Depends(get_book_store)
    ):
        """
        Update the title and/or author of a book.

        - **book_id**: Positive integer identifier
        """
        parsed_id = parse_book_id(book_id)
        if not store.find_by_id(parsed_id):
            raise BookNotFoundError(parsed_id)

        payload = await read_json_object(request)
        result = validate_update(
            payload.get("title", MISSING),
            payload.get("author", MISSING)
        )
        if not result.valid:
            request.state.events.log_validation_failed("update", result.errors)
            if result.code == ValidationErrorCode.NO_FIELDS_PROVIDED:
                raise BadRequestError(result.errors[0], example=UPDATE_EXAMPLE)
            raise BadRequestError("Invalid book data", errors=result.errors)

        book, updated_fields = store.update_by_id(parsed_id, result.value)
        return _render(BookUpdatedResponse(updated_fields=updated_fields, data=book))

    @app.delete("/books/{book_id}", response_model=BookDeletedResponse, tags=["Books"])
    async def delete_book(book_id: str, store: BookStore = Depends(get_book_store)):
        """Remove a single book."""
        deleted = store.delete_by_id(parse_book_id(book_id))
        return _render(BookDeletedResponse(data=deleted))

    @app.delete("/books", response_model=BooksClearedResponse, tags=["Books"])
    async def delete_books(store: BookStore = Depends(get_book_store)):
        """Delete all books and restart identifiers at 1."""
        books, count = store.delete_all()
        return _render(BooksClearedResponse(count=count, data=books))

    return app


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower()
    )
