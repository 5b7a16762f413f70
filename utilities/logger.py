"""
Structured logging for the Book Management API using structlog.
Routes structlog events through the standard library so uvicorn and the
application share one output stream.
"""

import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Union

import structlog
from structlog.stdlib import LoggerFactory


def _build_processors(log_format: str, debug: bool) -> List[Any]:
    processors: List[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    return processors


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Configure structlog and the root stdlib logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional file that receives a copy of every log line
        debug: Add call-site information to every event
    """
    level = getattr(logging, log_level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    structlog.configure(
        processors=_build_processors(log_format, debug),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        logging.getLogger().addHandler(file_handler)

    get_logger(__name__).info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class RequestLogger:
    """
    Logger for HTTP traffic and book mutations with bound context.
    """

    def __init__(self, name: str = "library"):
        self.logger = structlog.get_logger(name)
        self.context = {}

    def bind_context(self, **kwargs) -> 'RequestLogger':
        """Bind context variables included in every subsequent event."""
        self.context.update(kwargs)
        return self

    def log_request(self, status_code: int, duration_ms: float) -> None:
        """Log a completed HTTP request; method and path come from bound context."""
        level = "info" if status_code < 500 else "error"
        getattr(self.logger, level)(
            "Request handled",
            status_code=status_code,
            duration_ms=round(duration_ms, 2),
            **self.context
        )

    def log_book_created(self, book_id: int, title: str, author: str) -> None:
        self.logger.info(
            "Book created",
            book_id=book_id,
            title=title,
            author=author,
            **self.context
        )

    def log_book_updated(self, book_id: int, updated_fields: List[str]) -> None:
        self.logger.info(
            "Book updated",
            book_id=book_id,
            updated_fields=updated_fields,
            **self.context
        )

    def log_book_deleted(self, book_id: int, title: str) -> None:
        self.logger.info("Book deleted", book_id=book_id, title=title, **self.context)

    def log_books_cleared(self, count: int) -> None:
        self.logger.info("All books deleted", count=count, **self.context)

    def log_validation_failed(self, operation: str, errors: List[str]) -> None:
        """Log a rejected request payload."""
        self.logger.warning(
            "Validation failed",
            operation=operation,
            errors=errors,
            **self.context
        )
