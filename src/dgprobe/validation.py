# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""API key validation built on a single handshake probe."""

from __future__ import annotations

import re

from .errors import AUTHENTICATION_FAILED_MESSAGE, ApiKeyValidationError
from .probe import ConnectivityProbe

DEFAULT_VALIDATION_TIMEOUT_MS = 4000

_AUTH_RE = re.compile(r"Authentication failed|401|Unauthorized|access token", re.IGNORECASE)
_TIMEOUT_RE = re.compile(r"timed out|timeout", re.IGNORECASE)


async def validate_api_key(
    api_key: str,
    timeout_ms: int | None = None,
    *,
    probe: ConnectivityProbe | None = None,
) -> None:
    """Return quietly when the key opens a connection, else raise ApiKeyValidationError."""
    if timeout_ms is None:
        timeout_ms = DEFAULT_VALIDATION_TIMEOUT_MS
    result = await (probe or ConnectivityProbe()).probe(api_key, timeout_ms)
    if result.success:
        return

    msg = result.message
    if _AUTH_RE.search(msg):
        raise ApiKeyValidationError(AUTHENTICATION_FAILED_MESSAGE, result)
    if result.timed_out or _TIMEOUT_RE.search(msg):
        raise ApiKeyValidationError(
            f"WebSocket connection failed (possible network/firewall/proxy issue): {msg}",
            result,
        )
    raise ApiKeyValidationError(f"Deepgram API key validation failed: {msg}", result)
