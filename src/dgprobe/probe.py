# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Bounded-time WebSocket handshake probe against the Deepgram listen endpoint.

The probe never raises for transport problems: every outcome (success,
authentication/permission failure, other handshake failure, timeout) is
encoded in the returned ProbeResult.
"""

from __future__ import annotations

import asyncio
import logging

from .config import ProbeSettings, load_probe_settings
from .errors import ProbeFailure, classify_exception, failure_message
from .models import ABNORMAL_CLOSURE, TIMEOUT_REASON, ProbeRequest, ProbeResult
from .transport.client import Connection, Connector, create_default_connector

logger = logging.getLogger(__name__)

DEEPGRAM_HOST = "api.deepgram.com"
LISTEN_PATH = "/v1/listen"
LISTEN_MODEL = "nova-2"
LISTEN_LANGUAGE = "en-US"
LISTEN_ENCODING = "linear16"
LISTEN_SAMPLE_RATE = 16000

SUCCESS_MESSAGE = "WebSocket connection established successfully"


def build_listen_url(credential: str) -> str:
    """Target address for a probe. The credential is interpolated as-is, without escaping."""
    return (
        f"wss://{DEEPGRAM_HOST}{LISTEN_PATH}"
        f"?token={credential}"
        f"&model={LISTEN_MODEL}"
        f"&language={LISTEN_LANGUAGE}"
        f"&encoding={LISTEN_ENCODING}"
        f"&sample_rate={LISTEN_SAMPLE_RATE}"
    )


def timeout_result(timeout_ms: int) -> ProbeResult:
    return ProbeResult(
        success=False,
        message=failure_message(ProbeFailure.TIMEOUT, str(timeout_ms)),
        code=ABNORMAL_CLOSURE,
        reason=TIMEOUT_REASON,
    )


# Close tasks that outlived their probe; referenced here until they finish.
_closing: set[asyncio.Task] = set()


def _finish_close(closing: asyncio.Task) -> None:
    _closing.discard(closing)
    if not closing.cancelled() and closing.exception() is not None:
        logger.debug("Close after probe failed: %s", closing.exception())


async def _close_within(connection: Connection, budget: float) -> None:
    """Best-effort close bounded by ``budget`` seconds; an unfinished close keeps running detached."""
    closing = asyncio.ensure_future(connection.close())
    done, _ = await asyncio.wait({closing}, timeout=max(budget, 0))
    if closing in done:
        _finish_close(closing)
        return
    _closing.add(closing)
    closing.add_done_callback(_finish_close)


async def _abandon(handshake: asyncio.Task) -> None:
    """Cancel a handshake that lost the race; close it if it slipped through anyway."""
    handshake.cancel()
    await asyncio.wait({handshake})
    if handshake.cancelled() or handshake.exception() is not None:
        return
    await _close_within(handshake.result(), 0)


class ConnectivityProbe:
    """
    Races one handshake against a timer and classifies the outcome.

    Instances hold no per-probe state, so one probe may serve concurrent calls.
    """

    def __init__(self, connector: Connector | None = None, settings: ProbeSettings | None = None):
        self.settings = settings or load_probe_settings()
        self.connector = connector or create_default_connector(self.settings)

    async def run(self, request: ProbeRequest) -> ProbeResult:
        return await self.probe(request.credential, request.timeout_ms)

    async def probe(self, credential: str, timeout_ms: int) -> ProbeResult:
        url = build_listen_url(credential)
        logger.info("Attempting connection to: %s", url)
        logger.info("Timeout: %sms", timeout_ms)

        if timeout_ms <= 0:
            logger.warning("Connection timed out after %sms", timeout_ms)
            return timeout_result(timeout_ms)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_ms / 1000
        handshake = asyncio.ensure_future(self.connector.connect(url))
        try:
            done, _ = await asyncio.wait({handshake}, timeout=timeout_ms / 1000)
        except asyncio.CancelledError:
            await _abandon(handshake)
            raise

        if handshake not in done:
            await _abandon(handshake)
            logger.warning("Connection timed out after %sms", timeout_ms)
            return timeout_result(timeout_ms)

        exc = handshake.exception()
        if exc is not None:
            detail = str(exc) or type(exc).__name__
            logger.warning("WebSocket error: %s", detail)
            category = classify_exception(exc)
            return ProbeResult(success=False, message=failure_message(category, detail))

        logger.info("WebSocket opened successfully")
        await _close_within(handshake.result(), deadline - loop.time())
        return ProbeResult(success=True, message=SUCCESS_MESSAGE)


async def probe_deepgram(api_key: str, timeout_ms: int, *, connector: Connector | None = None) -> ProbeResult:
    """Probe the Deepgram listen endpoint once with ``api_key``."""
    return await ConnectivityProbe(connector=connector).probe(api_key, timeout_ms)
