"""
Contacts API — Logging Configuration
=====================================

What:  One-call setup of the root logger for the server and the seeder.
How:   basicConfig to stdout with a single format; level from Settings.
"""

import logging
import sys

from app.config import Settings


def setup_logging(config: Settings) -> None:
    """
    Configure logging for the entire application.

    What:    Root logger to stdout with one consistent format.
    When:    Called once at process start, before anything else logs.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Containers capture stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
