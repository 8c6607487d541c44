# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for dgprobe."""

from .probe import ABNORMAL_CLOSURE, TIMEOUT_REASON, ProbeRequest, ProbeResult

__all__ = [
    "ABNORMAL_CLOSURE",
    "TIMEOUT_REASON",
    "ProbeRequest",
    "ProbeResult",
]
