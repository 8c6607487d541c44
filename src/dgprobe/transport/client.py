# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""WebSocket transport abstraction and factory."""

from typing import Protocol

from ..config import ProbeSettings, load_probe_settings


class Connection(Protocol):
    """The only thing a probe does with an opened connection is close it."""

    async def close(self) -> None: ...


class Connector(Protocol):
    """Minimal protocol for opening a WebSocket connection."""

    async def connect(self, url: str) -> Connection: ...


def create_default_connector(settings: ProbeSettings | None = None) -> Connector:
    """Factory for the default websockets-backed connector."""
    from .websockets_client import WebsocketsConnector

    return WebsocketsConnector(settings or load_probe_settings())
