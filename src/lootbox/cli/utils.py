"""
Shared utilities for CLI commands.
"""

import logging


def setup_logging(level: str = "info") -> None:
    """
    Configure logging for CLI. Records go to stderr.

    Args:
        level: Log level name from the resolved settings
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Silence noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
