# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe request/result models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

ABNORMAL_CLOSURE = 1006
TIMEOUT_REASON = "Timeout"


@dataclass(frozen=True)
class ProbeRequest:
    credential: str
    timeout_ms: int


@dataclass(frozen=True)
class ProbeResult:
    """
    Outcome of one handshake probe.

    ``code`` and ``reason`` are only set on the timeout branch; the
    serialized field names are consumed by existing host UIs and must not change.
    """

    success: bool
    message: str
    code: int | None = None
    reason: str | None = None

    @property
    def timed_out(self) -> bool:
        return self.code == ABNORMAL_CLOSURE and self.reason == TIMEOUT_REASON

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "code": self.code,
            "reason": self.reason,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ProbeResult:
        code = data.get("code")
        reason = data.get("reason")
        return cls(
            success=bool(data.get("success")),
            message=str(data.get("message") or ""),
            code=int(code) if code is not None else None,
            reason=str(reason) if reason is not None else None,
        )
