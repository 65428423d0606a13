#!/usr/bin/env python3
"""
openFDA Drug Label MCP Server Entry Point

Starts the MCP server on stdio for use by MCP clients (Claude Desktop and
similar hosts).

Usage:
    python mcp_openfda_server.py [--config CONFIG_FILE] [--log-level LEVEL]

Environment:
    OPENFDA_API_KEY    optional openFDA API key (raises the rate limit)
"""

import sys
import asyncio
import logging
import argparse
import signal
import warnings
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from openfda_mcp.config import load_config
from openfda_mcp.logging_utils import setup_logging
from openfda_mcp.mcp_server import OpenFDAMCPServer


def _is_client_disconnect_error(exception: BaseException) -> bool:
    """Check if an exception represents a client disconnect."""
    if isinstance(exception, (BrokenPipeError, ConnectionResetError, ConnectionAbortedError)):
        return True

    error_str = str(exception)
    error_indicators = [
        "Broken pipe", "Connection reset", "Connection aborted",
        "BrokenResourceError", "ClosedResourceError",
        "[Errno 32]", "[Errno 104]"
    ]

    return any(indicator in error_str for indicator in error_indicators)


def _is_client_disconnect_group(exception_group: BaseExceptionGroup) -> bool:
    """Check if ExceptionGroup contains only client disconnect errors."""
    if not exception_group.exceptions:
        return False

    for exc in exception_group.exceptions:
        if isinstance(exc, BaseExceptionGroup):
            if not _is_client_disconnect_group(exc):
                return False
        elif not _is_client_disconnect_error(exc):
            return False

    return True


def setup_signal_handlers(shutdown_event: asyncio.Event) -> None:
    """Setup signal handlers for graceful shutdown.

    The first signal asks the server to close its transport; a second one
    exits immediately.
    """
    loop = asyncio.get_running_loop()
    received_signal = False

    def signal_handler(signum, frame):
        nonlocal received_signal

        # No printing here: stdout carries the MCP protocol
        if received_signal:
            sys.exit(1)
        received_signal = True
        loop.call_soon_threadsafe(shutdown_event.set)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if hasattr(signal, 'SIGHUP'):
        signal.signal(signal.SIGHUP, signal_handler)


async def main():
    """Main entry point for the openFDA MCP server."""
    parser = argparse.ArgumentParser(description="openFDA Drug Label MCP Server")
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (defaults to LOG_LEVEL or the config file)"
    )
    parser.add_argument(
        "--transport", "-t",
        choices=["stdio"],
        default="stdio",
        help="Transport type for MCP server"
    )
    parser.add_argument(
        "--force-mcp",
        action="store_true",
        help="Force MCP server mode even when run in terminal"
    )

    args = parser.parse_args()

    if sys.stdin.isatty() and sys.stdout.isatty() and not args.force_mcp:
        print("openFDA Drug Label MCP Server")
        print()
        print("This is an MCP (Model Context Protocol) server designed to be")
        print("called by AI clients, not run manually.")
        print()
        print("To try the tools from a terminal, use:")
        print("  openfda-mcp tools")
        print("  openfda-mcp call get_label_by_drug_name '{\"name\": \"ibuprofen\"}'")
        print()
        print("To force MCP server mode anyway, use: --force-mcp")
        sys.exit(0)

    config = load_config(args.config)

    setup_logging(args.log_level or config.log_level, include_request_id=True)
    warnings.filterwarnings("ignore", category=ResourceWarning)
    logging.getLogger("mcp.server.stdio").setLevel(logging.CRITICAL)
    logging.getLogger("anyio").setLevel(logging.WARNING)
    logger = logging.getLogger(__name__)

    shutdown_event = asyncio.Event()
    setup_signal_handlers(shutdown_event)

    server = OpenFDAMCPServer(config)

    try:
        logger.info("Starting openFDA MCP Server...")
        logger.info(f"openFDA endpoint: {config.openfda.base_url}")
        logger.info(f"Transport: {args.transport}")

        await server.initialize()
        sys.stderr.flush()

        await server.run(transport_type=args.transport, shutdown_event=shutdown_event)

    except (BrokenPipeError, ConnectionResetError, ConnectionAbortedError):
        logger.debug("Client disconnected")
    except BaseExceptionGroup as eg:
        if _is_client_disconnect_group(eg):
            logger.debug("Client disconnected (exception group)")
        else:
            logger.exception("Fatal error in MCP server (exception group)")
            sys.exit(1)
    except asyncio.CancelledError:
        logger.debug("Server task cancelled")
    except Exception as e:
        if _is_client_disconnect_error(e):
            logger.debug(f"Client disconnected (wrapped): {type(e).__name__}")
        else:
            logger.exception("Fatal error in MCP server")
            sys.exit(1)
    finally:
        await server.shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)
