"""
Logging configuration for dbx-tools.

Everything logs through the "dbx" logger: the HTTP adapter records each
Dropbox call and its status, retry records backoff waits, and the executor
records pagination. Output goes to stderr because stdout carries MCP.
Log lines name routes and statuses, never tokens or request bodies.
"""

import logging
import sys

# Create logger for the package
logger = logging.getLogger("dbx")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for dbx-tools.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    logger.setLevel(getattr(logging, level.upper()))

    # Only add handler if not already configured
    if not logger.handlers:
        # stderr: stdout carries the MCP protocol
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)


# server.py and cli.py call configure_logging(); importing this module attaches no handler.


def log_api_call(route: str, **params: object) -> None:
    """Log an API call with key parameters. Never pass the token here."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logger.debug(f"API: {route}({param_str})")


def log_api_result(route: str, status: int | None = None) -> None:
    """Log API result summary."""
    if status is not None:
        logger.debug(f"API: {route} returned HTTP {status}")
    else:
        logger.debug(f"API: {route} completed")


def log_retry(attempt: int, max_attempts: int, delay_ms: int, reason: str) -> None:
    """Log a retry attempt."""
    logger.warning(
        f"Retry {attempt}/{max_attempts} in {delay_ms}ms: {reason}"
    )
