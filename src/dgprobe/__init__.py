# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
dgprobe package entrypoint.

This package checks whether a Deepgram API key can open the streaming listen
endpoint by performing one bounded-time WebSocket handshake. Transport is
abstracted behind an injectable connector, and results are modeled with
typed dataclasses so a host UI can render them directly.
"""

from .commands import COMMANDS, invoke, probe_native
from .config import ProbeSettings, load_probe_settings
from .errors import (
    ApiKeyValidationError,
    DgprobeError,
    InvalidCommandArguments,
    ProbeFailure,
    UnknownCommandError,
    classify_exception,
)
from .log import setup_logging
from .models import ProbeRequest, ProbeResult
from .probe import ConnectivityProbe, build_listen_url, probe_deepgram
from .transport import Connector, WebsocketsConnector, create_default_connector
from .validation import validate_api_key
from .version import __version__

__all__ = [
    "COMMANDS",
    "ApiKeyValidationError",
    "ConnectivityProbe",
    "Connector",
    "DgprobeError",
    "InvalidCommandArguments",
    "ProbeFailure",
    "ProbeRequest",
    "ProbeResult",
    "ProbeSettings",
    "UnknownCommandError",
    "WebsocketsConnector",
    "build_listen_url",
    "classify_exception",
    "create_default_connector",
    "invoke",
    "load_probe_settings",
    "probe_deepgram",
    "probe_native",
    "setup_logging",
    "validate_api_key",
    "__version__",
]
