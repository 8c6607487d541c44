# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""websockets-backed Connector implementation."""

from __future__ import annotations

import ssl

from websockets.asyncio.client import ClientConnection, connect

from ..config import ProbeSettings, load_probe_settings
from .client import Connector


def _unverified_ssl_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


class WebsocketsConnector(Connector):
    """Opens client connections with the websockets asyncio implementation."""

    def __init__(self, settings: ProbeSettings | None = None):
        self.settings = settings or load_probe_settings()

    async def connect(self, url: str) -> ClientConnection:
        kwargs = {}
        if not self.settings.verify_ssl and url.startswith("wss://"):
            kwargs["ssl"] = _unverified_ssl_context()
        # open_timeout is disabled: the probe's own timer is the only bound.
        return await connect(
            url,
            open_timeout=None,
            close_timeout=self.settings.close_timeout,
            ping_interval=None,
            user_agent_header=self.settings.user_agent,
            **kwargs,
        )
