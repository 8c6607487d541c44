# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Failure taxonomy for handshake probes and host-level exceptions."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from websockets.exceptions import InvalidStatus

if TYPE_CHECKING:
    from .models import ProbeResult

AUTHENTICATION_FAILED_MESSAGE = "Authentication failed — check your Deepgram API key"
PERMISSION_DENIED_MESSAGE = "Permission denied — check your Deepgram account and plan"


class ProbeFailure(str, Enum):
    AUTHENTICATION = "AUTHENTICATION"
    PERMISSION = "PERMISSION"
    CONNECTION = "CONNECTION"
    TIMEOUT = "TIMEOUT"


class DgprobeError(Exception):
    """Base class for errors raised by the host-facing layers."""


class UnknownCommandError(DgprobeError):
    def __init__(self, name: str):
        super().__init__(f"Command {name} not found")
        self.name = name


class InvalidCommandArguments(DgprobeError):
    def __init__(self, command: str, detail: str):
        super().__init__(f"invalid args for command {command}: {detail}")
        self.command = command
        self.detail = detail


class ApiKeyValidationError(DgprobeError):
    """Raised by validate_api_key; carries the probe result that caused it."""

    def __init__(self, message: str, result: ProbeResult | None = None):
        super().__init__(message)
        self.result = result


def _status_code(exc: BaseException) -> int | None:
    if isinstance(exc, InvalidStatus):
        return exc.response.status_code
    response = getattr(exc, "response", None)
    status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def classify_exception(exc: BaseException) -> ProbeFailure:
    """
    Map a handshake exception to a ProbeFailure.

    The HTTP status exposed by the transport wins; otherwise the stringified
    error is searched for "401"/"Unauthorized", then "403"/"Forbidden".
    """
    status = _status_code(exc)
    if status == 401:
        return ProbeFailure.AUTHENTICATION
    if status == 403:
        return ProbeFailure.PERMISSION

    text = str(exc)
    if "401" in text or "Unauthorized" in text:
        return ProbeFailure.AUTHENTICATION
    if "403" in text or "Forbidden" in text:
        return ProbeFailure.PERMISSION
    return ProbeFailure.CONNECTION


def failure_message(category: ProbeFailure, detail: str = "") -> str:
    """User-facing message for a failure category."""
    if category == ProbeFailure.AUTHENTICATION:
        return AUTHENTICATION_FAILED_MESSAGE
    if category == ProbeFailure.PERMISSION:
        return PERMISSION_DENIED_MESSAGE
    if category == ProbeFailure.TIMEOUT:
        return f"WebSocket probe timed out ({detail}ms)"
    return f"WebSocket connection failed: {detail}"
