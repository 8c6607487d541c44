# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Command dispatch table exposed to a host shell.

A host calls ``invoke(name, args)`` with JSON-decoded arguments and receives
a JSON-ready value back. ``probe_deepgram`` keeps its name and argument names
for compatibility with existing callers.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from .errors import DgprobeError, InvalidCommandArguments, UnknownCommandError
from .models import ProbeRequest
from .probe import ConnectivityProbe

logger = logging.getLogger(__name__)

DEFAULT_NATIVE_TIMEOUT_MS = 5000
U64_MAX = 2**64 - 1


def _require_str(command: str, args: Mapping[str, Any], key: str) -> str:
    if key not in args:
        raise InvalidCommandArguments(command, f"missing required key {key}")
    value = args[key]
    if not isinstance(value, str):
        raise InvalidCommandArguments(command, f"{key} must be a string")
    return value


def _require_u64(command: str, args: Mapping[str, Any], key: str) -> int:
    if key not in args:
        raise InvalidCommandArguments(command, f"missing required key {key}")
    value = args[key]
    # bool is an int subclass but never a valid duration.
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U64_MAX:
        raise InvalidCommandArguments(command, f"{key} must be an unsigned 64-bit integer")
    return value


async def greet(args: Mapping[str, Any]) -> str:
    name = _require_str("greet", args, "name")
    return f"Hello, {name}! You've been greeted from Python!"


async def probe_deepgram(args: Mapping[str, Any]) -> dict[str, Any]:
    request = ProbeRequest(
        credential=_require_str("probe_deepgram", args, "api_key"),
        timeout_ms=_require_u64("probe_deepgram", args, "timeout_ms"),
    )
    result = await ConnectivityProbe().run(request)
    return result.to_dict()


CommandHandler = Callable[[Mapping[str, Any]], Awaitable[Any]]

COMMANDS: dict[str, CommandHandler] = {
    "greet": greet,
    "probe_deepgram": probe_deepgram,
}


async def invoke(name: str, args: Mapping[str, Any] | None = None) -> Any:
    """Dispatch ``name`` with ``args``; raises DgprobeError subclasses for bad calls."""
    handler = COMMANDS.get(name)
    if handler is None:
        raise UnknownCommandError(name)
    logger.debug("Invoking command %s", name)
    return await handler(args or {})


async def probe_native(api_key: str, timeout_ms: int = DEFAULT_NATIVE_TIMEOUT_MS) -> dict[str, Any]:
    """Invoke ``probe_deepgram`` through the dispatch table, folding dispatch errors into a result."""
    try:
        return await invoke("probe_deepgram", {"api_key": api_key, "timeout_ms": timeout_ms})
    except DgprobeError as exc:
        logger.warning("Native probe failed: %s", exc)
        return {"success": False, "message": f"Native probe failed: {exc}"}
