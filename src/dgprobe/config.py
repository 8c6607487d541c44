# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for dgprobe."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"dgprobe/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ProbeSettings:
    """Probe defaults. The endpoint itself is fixed and not part of the settings."""

    timeout_ms: int = 5000
    close_timeout: float = 2.0
    verify_ssl: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    api_key: str | None = None

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout_ms = _int_env("DGPROBE_TIMEOUT_MS", cls.timeout_ms)
        if timeout_ms < 0:
            timeout_ms = cls.timeout_ms
        close_timeout = _float_env("DGPROBE_CLOSE_TIMEOUT", cls.close_timeout)
        if close_timeout <= 0:
            close_timeout = cls.close_timeout
        return cls(
            timeout_ms=timeout_ms,
            close_timeout=close_timeout,
            verify_ssl=_bool_env("DGPROBE_VERIFY_SSL", cls.verify_ssl),
            user_agent=os.getenv("DGPROBE_USER_AGENT", cls.user_agent),
            api_key=os.getenv("DEEPGRAM_API_KEY") or None,
        )


def load_probe_settings() -> ProbeSettings:
    """Load probe settings from environment with sensible defaults."""
    return ProbeSettings.from_env()
