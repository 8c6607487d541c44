# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""dgprobe CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from ..config import ProbeSettings, load_probe_settings
from ..log import setup_logging
from ..models import ProbeResult
from ..probe import ConnectivityProbe
from ..transport import create_default_connector


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Probe the Deepgram streaming endpoint with a WebSocket handshake")
    parser.add_argument(
        "api_key",
        nargs="?",
        help="Deepgram API key (defaults to $DEEPGRAM_API_KEY)",
    )
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=None,
        help="Handshake timeout in milliseconds (defaults to $DGPROBE_TIMEOUT_MS or 5000)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of human-friendly summary",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful behind intercepting proxies)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to $DGPROBE_LOG_LEVEL or WARNING)",
    )
    return parser


def _print_json(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _pretty_print(result: ProbeResult) -> None:
    status = "OK" if result.success else "FAILED"
    print(f"[dgprobe] {status}: {result.message}")
    if result.code is not None:
        print(f"Code: {result.code}")
    if result.reason:
        print(f"Reason: {result.reason}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: ProbeSettings = load_probe_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    api_key = args.api_key or settings.api_key
    if not api_key:
        parser.error("an API key is required (argument or DEEPGRAM_API_KEY)")
    timeout_ms = args.timeout_ms if args.timeout_ms is not None else settings.timeout_ms
    if timeout_ms < 0:
        parser.error("--timeout-ms must not be negative")

    probe = ConnectivityProbe(connector=create_default_connector(settings), settings=settings)
    result = asyncio.run(probe.probe(api_key, timeout_ms))

    if args.json:
        _print_json(result)
    else:
        _pretty_print(result)

    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
