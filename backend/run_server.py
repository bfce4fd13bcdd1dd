#!/usr/bin/env python3
"""
Entrypoint for the WorldGuessr map page API.

This script configures logging and serves the FastAPI application with
uvicorn.
"""

import logging
import sys

import uvicorn

from guessr.core.config import settings


# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.ENVIRONMENT == "development" else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def main():
    """Main entry point for the API server."""
    logger.info(f"Starting {settings.PROJECT_NAME} API server...")

    try:
        uvicorn.run(
            "guessr.main:app",
            host="0.0.0.0",
            port=8000,
            log_config=None,
            reload=settings.ENVIRONMENT == "development",
        )
    except Exception as e:
        logger.error(f"Server failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
