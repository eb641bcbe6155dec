"""
Ethermint proxy CLI entry point.

Serve canonical-chain JSON-RPC clients from an ethermint node whose headers
link to their parents by tendermint hash.

Usage::

    python -m ethermint_proxy
    python -m ethermint_proxy --upstream http://localhost:8545 --database ./proxy.db
    python -m ethermint_proxy --port 8545 --poll-interval 2 -v

Options:
    --upstream         Upstream JSON-RPC endpoint (env: PROXY_UPSTREAM_URL)
    --database         SQLite file for the translation mapping (env: PROXY_DATABASE_PATH)
    --host             Address the JSON-RPC server binds to (default: 0.0.0.0)
    --port             Port the JSON-RPC server listens on (env: PROXY_PORT)
    --poll-interval    Seconds between polls for new blocks (env: PROXY_POLL_INTERVAL)
    --request-timeout  Upstream request timeout in seconds (env: PROXY_REQUEST_TIMEOUT)
    --no-api           Only synchronize, do not serve queries
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from ethermint_proxy import config
from ethermint_proxy.api import ApiServerConfig
from ethermint_proxy.node import Node, NodeConfig
from ethermint_proxy.types import StoreError, SyncError

logger = logging.getLogger(__name__)

ProxyFailure = SyncError | StoreError
"""Failures that end the run with a non-zero exit status."""


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds ANSI colors to log output."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)

        timestamp = self.formatTime(record, self.datefmt)
        colored_time = f"{self.CYAN}{timestamp}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"

        message = f"{colored_time} {levelname} {name}: {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        if record.stack_info:
            message += "\n" + self.formatStack(record.stack_info)
        return message


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging for the proxy with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    # Use colored formatter unless disabled
    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # Per-request access lines drown out sync progress.
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_config(args: argparse.Namespace) -> NodeConfig:
    """Translate parsed arguments into a node configuration."""
    api_config = None
    if not args.no_api:
        api_config = ApiServerConfig(host=args.host, port=args.port)

    return NodeConfig(
        upstream_url=args.upstream,
        database_path=args.database,
        api_config=api_config,
        poll_interval=args.poll_interval,
        request_timeout=args.request_timeout,
    )


async def run_proxy(node_config: NodeConfig) -> None:
    """
    Run the proxy until shutdown.

    Args:
        node_config: Wiring parameters for the node.
    """
    logger.info("Upstream: %s", node_config.upstream_url)
    logger.info("Database: %s", node_config.database_path)

    node = Node.from_config(node_config)
    await node.run()


def _fatal_cause(error: BaseException) -> ProxyFailure | None:
    """Find the proxy failure that ended the run, unwrapping task groups."""
    if isinstance(error, (SyncError, StoreError)):
        return error
    if isinstance(error, BaseExceptionGroup):
        for inner in error.exceptions:
            cause = _fatal_cause(inner)
            if cause is not None:
                return cause
    return None


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Ethermint hash translation proxy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--upstream",
        default=config.UPSTREAM_URL,
        help=f"Upstream JSON-RPC endpoint (default: {config.UPSTREAM_URL})",
    )
    parser.add_argument(
        "--database",
        type=Path,
        default=Path(config.DATABASE_PATH),
        help=f"SQLite file for the translation mapping (default: {config.DATABASE_PATH})",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Address the JSON-RPC server binds to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.PORT,
        help=f"Port the JSON-RPC server listens on (default: {config.PORT})",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=config.POLL_INTERVAL,
        help=f"Seconds between polls for new blocks (default: {config.POLL_INTERVAL})",
    )
    parser.add_argument(
        "--request-timeout",
        type=float,
        default=config.REQUEST_TIMEOUT,
        help=f"Upstream request timeout in seconds (default: {config.REQUEST_TIMEOUT})",
    )
    parser.add_argument(
        "--no-api",
        action="store_true",
        help="Only synchronize, do not serve queries",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    args = parser.parse_args(argv)

    if args.poll_interval <= 0:
        parser.error("--poll-interval must be positive")
    if args.request_timeout <= 0:
        parser.error("--request-timeout must be positive")

    setup_logging(args.verbose, args.no_color)

    try:
        asyncio.run(run_proxy(build_config(args)))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        cause = _fatal_cause(e)
        if cause is None:
            raise
        logger.error("Proxy stopped: %s", cause.message)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
