"""Logging helpers for library users and scripts."""

from __future__ import annotations

import logging


def configure_logging(level: int = logging.INFO) -> None:
    """Configure a minimal logging setup for examples and scripts.

    Args:
        level: Root logger level, e.g. ``logging.DEBUG``.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
