#!/usr/bin/env python3
"""Unified entry point for MemoryKeeper.

Serves the REST API and the MCP tools (mounted under /mcp) from one process,
so both work on the same in-memory record set.
"""

import logging

import uvicorn

from config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    """Main entry point - start the combined server."""
    logger.info("="*60)
    logger.info("MemoryKeeper - Unified Startup")
    logger.info("="*60)
    logger.info(f"  - API Server: http://127.0.0.1:{settings.API_PORT}")
    logger.info(f"  - API Docs: http://127.0.0.1:{settings.API_PORT}/docs")
    logger.info(f"  - MCP Server: http://127.0.0.1:{settings.API_PORT}/mcp/sse")
    logger.info("="*60)

    uvicorn.run(
        "api_server:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level="info"
    )


if __name__ == "__main__":
    main()
