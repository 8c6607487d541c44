# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""WebSocket transport exports."""

from .client import Connection, Connector, create_default_connector
from .websockets_client import WebsocketsConnector

__all__ = [
    "Connection",
    "Connector",
    "WebsocketsConnector",
    "create_default_connector",
]
