"""CLI entry point for running an MCP server over stdio.

Stdio is how desktop MCP clients launch local servers. The variant is taken
from the VARIANT environment variable (``coach`` or ``elite-mindset``).

Usage:
    python -m elitemindset.mcp.cli

Or via the installed script:
    elitemindset-stdio
"""

import asyncio
import logging

from ..config import get_settings
from ..logging_middleware import configure_logging
from .server import run_mcp_server

logger = logging.getLogger(__name__)


def main():
    """Main entry point for the stdio MCP server."""
    settings = get_settings()
    # stdout carries the protocol; logs go to stderr.
    configure_logging(settings.LOG_LEVEL)

    logger.info("Starting %s MCP server over stdio", settings.VARIANT.value)
    asyncio.run(run_mcp_server(settings.VARIANT))


if __name__ == "__main__":
    main()
