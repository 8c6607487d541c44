# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import logging

import pytest
from websockets.datastructures import Headers
from websockets.exceptions import InvalidStatus
from websockets.http11 import Response

from dgprobe import probe as probe_module
from dgprobe.config import ProbeSettings
from dgprobe.errors import AUTHENTICATION_FAILED_MESSAGE, PERMISSION_DENIED_MESSAGE
from dgprobe.models import ProbeRequest
from dgprobe.probe import SUCCESS_MESSAGE, ConnectivityProbe, build_listen_url, probe_deepgram


class DummyConnection:
    def __init__(self, fail_close=False):
        self.closed = False
        self.fail_close = fail_close

    async def close(self):
        self.closed = True
        if self.fail_close:
            raise RuntimeError("close failed")


class OpenConnector:
    def __init__(self, connection=None):
        self.connection = connection or DummyConnection()
        self.urls = []

    async def connect(self, url):
        self.urls.append(url)
        return self.connection


class FailingConnector:
    def __init__(self, exc):
        self.exc = exc

    async def connect(self, url):  # noqa: ARG002
        raise self.exc


class HangingConnector:
    def __init__(self):
        self.calls = 0
        self.cancelled = False

    async def connect(self, url):  # noqa: ARG002
        self.calls += 1
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.cancelled = True
            raise


def _probe(connector):
    return ConnectivityProbe(connector=connector, settings=ProbeSettings())


def test_build_listen_url_embeds_credential_verbatim():
    url = build_listen_url("abc 123")
    assert url == (
        "wss://api.deepgram.com/v1/listen?token=abc 123"
        "&model=nova-2&language=en-US&encoding=linear16&sample_rate=16000"
    )


def test_build_listen_url_does_not_escape_query_characters():
    url = build_listen_url("a&model=x")
    assert url == (
        "wss://api.deepgram.com/v1/listen?token=a&model=x"
        "&model=nova-2&language=en-US&encoding=linear16&sample_rate=16000"
    )


@pytest.mark.asyncio
async def test_successful_handshake_closes_connection():
    connector = OpenConnector()
    result = await _probe(connector).probe("good-key", 5000)

    assert result.to_dict() == {
        "success": True,
        "message": "WebSocket connection established successfully",
        "code": None,
        "reason": None,
    }
    assert connector.connection.closed is True
    assert connector.urls == [build_listen_url("good-key")]


@pytest.mark.asyncio
async def test_close_failure_is_ignored():
    connector = OpenConnector(DummyConnection(fail_close=True))
    result = await _probe(connector).probe("good-key", 5000)
    assert result.success is True
    assert result.message == SUCCESS_MESSAGE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc, message",
    [
        (InvalidStatus(Response(401, "Unauthorized", Headers(), b"")), AUTHENTICATION_FAILED_MESSAGE),
        (RuntimeError("HTTP error: 401 Unauthorized"), AUTHENTICATION_FAILED_MESSAGE),
        (InvalidStatus(Response(403, "Forbidden", Headers(), b"")), PERMISSION_DENIED_MESSAGE),
        (RuntimeError("Forbidden"), PERMISSION_DENIED_MESSAGE),
    ],
)
async def test_rejected_handshake_is_classified(exc, message):
    result = await _probe(FailingConnector(exc)).probe("bad-key", 5000)
    assert result.success is False
    assert result.message == message
    assert result.code is None
    assert result.reason is None


@pytest.mark.asyncio
async def test_other_errors_embed_raw_text():
    result = await _probe(FailingConnector(ConnectionRefusedError("Connection refused"))).probe("k", 5000)
    assert result.success is False
    assert result.message == "WebSocket connection failed: Connection refused"
    assert result.code is None
    assert result.reason is None


@pytest.mark.asyncio
async def test_error_without_text_uses_type_name():
    result = await _probe(FailingConnector(OSError())).probe("k", 5000)
    assert result.message == "WebSocket connection failed: OSError"


@pytest.mark.asyncio
async def test_timeout_cancels_the_handshake():
    connector = HangingConnector()
    result = await _probe(connector).probe("any-key", 1)

    assert result.to_dict() == {
        "success": False,
        "message": "WebSocket probe timed out (1ms)",
        "code": 1006,
        "reason": "Timeout",
    }
    assert connector.cancelled is True


@pytest.mark.asyncio
async def test_zero_timeout_always_times_out():
    connector = OpenConnector()
    result = await _probe(connector).probe("good-key", 0)

    assert result.success is False
    assert result.code == 1006
    assert result.reason == "Timeout"
    assert "0ms" in result.message
    assert connector.urls == []


@pytest.mark.asyncio
async def test_run_accepts_probe_request():
    result = await _probe(OpenConnector()).run(ProbeRequest(credential="good-key", timeout_ms=5000))
    assert result.success is True


@pytest.mark.asyncio
async def test_concurrent_probes_do_not_interfere():
    class RoutingConnector:
        async def connect(self, url):
            if "token=good" in url:
                return DummyConnection()
            if "token=bad" in url:
                raise InvalidStatus(Response(401, "Unauthorized", Headers(), b""))
            await asyncio.sleep(3600)

    probe = _probe(RoutingConnector())
    slow, good, bad = await asyncio.gather(
        probe.probe("slow", 20),
        probe.probe("good", 5000),
        probe.probe("bad", 5000),
    )

    assert good.success is True
    assert bad.message == AUTHENTICATION_FAILED_MESSAGE
    assert slow.reason == "Timeout"
    assert slow.message == "WebSocket probe timed out (20ms)"


@pytest.mark.asyncio
async def test_caller_cancellation_propagates_and_cancels_handshake():
    connector = HangingConnector()
    task = asyncio.ensure_future(_probe(connector).probe("k", 60_000))
    while connector.calls == 0:
        await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await asyncio.sleep(0)
    assert connector.cancelled is True


@pytest.mark.asyncio
async def test_probe_logs_each_stage(caplog):
    caplog.set_level(logging.INFO, logger="dgprobe.probe")
    await _probe(HangingConnector()).probe("log-key", 1)

    text = caplog.text
    assert build_listen_url("log-key") in text
    assert "Timeout: 1ms" in text
    assert "timed out after 1ms" in text


@pytest.mark.asyncio
async def test_probe_deepgram_uses_given_connector():
    connector = OpenConnector()
    result = await probe_deepgram("good-key", 5000, connector=connector)
    assert result.success is True
    assert connector.urls


class StallingCloseConnection:
    def __init__(self):
        self.close_started = False
        self.close_cancelled = False

    async def close(self):
        self.close_started = True
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.close_cancelled = True
            raise


@pytest.mark.asyncio
async def test_close_is_bounded_by_remaining_timeout():
    connection = StallingCloseConnection()
    loop = asyncio.get_running_loop()
    started = loop.time()
    result = await _probe(OpenConnector(connection)).probe("good-key", 100)
    elapsed = loop.time() - started

    assert result.success is True
    assert connection.close_started is True
    assert elapsed < 0.5

    detached = list(probe_module._closing)
    assert len(detached) == 1
    detached[0].cancel()
    await asyncio.wait(detached)
    assert connection.close_cancelled is True
    assert not probe_module._closing


@pytest.mark.asyncio
async def test_cancellation_closes_handshake_that_finished_in_same_tick():
    ready = asyncio.Event()
    connection = DummyConnection()

    class GatedConnector:
        calls = 0

        async def connect(self, url):  # noqa: ARG002
            GatedConnector.calls += 1
            await ready.wait()
            return connection

    task = asyncio.ensure_future(_probe(GatedConnector()).probe("k", 60_000))
    while GatedConnector.calls == 0:
        await asyncio.sleep(0)
    ready.set()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    for _ in range(5):
        await asyncio.sleep(0)
    assert connection.closed is True
