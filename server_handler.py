"""
HTTP server entry point for receipt extraction service.

This module runs the FastAPI application under uvicorn.
"""

import os
import sys

import uvicorn
from dotenv import load_dotenv

from receipt_extraction.utils.logger import setup_logger


def run_server():
    """Entry point for running the HTTP service."""
    load_dotenv()
    logger = setup_logger("receipt-extraction")
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    
    logger.info(f"Starting receipt extraction API on {host}:{port}")
    try:
        uvicorn.run("receipt_extraction.handlers.api_handler:app", host=host, port=port)
    except KeyboardInterrupt:
        print("\nReceived keyboard interrupt, shutting down...")
        sys.exit(0)
    except Exception as e:
        print(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run_server()
