# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for dgprobe."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("DGPROBE_LOG_LEVEL", "WARNING").upper()

# websockets logs every handshake line and frame; only surface them when debugging.
TRANSPORT_LOGGER = "websockets"


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for CLI/library use."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    numeric_level = getattr(logging, effective_level, logging.WARNING)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    logging.basicConfig(
        level=numeric_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    transport_level = numeric_level if numeric_level <= logging.DEBUG else max(numeric_level, logging.WARNING)
    logging.getLogger(TRANSPORT_LOGGER).setLevel(transport_level)


__all__ = ["setup_logging"]
