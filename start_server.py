#!/usr/bin/env python3
"""
Startup script for the To-Do API
This script starts the FastAPI server with proper configuration
"""

import logging
import os

import uvicorn
from dotenv import load_dotenv

from todoapp.logging_setup import setup_logging

logger = logging.getLogger("todoapp.server")


def main():
    # Load environment variables
    load_dotenv()
    setup_logging(os.getenv("LOG_LEVEL", "INFO").upper())

    # Server configuration
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "true").lower() == "true"

    logger.info(f"Starting To-Do API server on {host}:{port} (reload={reload})")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )


if __name__ == "__main__":
    main()
