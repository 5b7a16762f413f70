#!/usr/bin/env python3
"""
Script to run the Book Management API server.
"""

import uvicorn

from api.main import ENDPOINTS
from api.models import CREATE_EXAMPLE
from utilities.config import config
from utilities.logger import get_logger, setup_logging


def main():
    """Run the API server."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )
    logger = get_logger(__name__)

    logger.info(
        "Book Management API server starting",
        server=config.get_base_url(),
        debug=config.debug,
        endpoints=list(ENDPOINTS),
        sample_book=CREATE_EXAMPLE
    )

    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    main()
