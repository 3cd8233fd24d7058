# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
import time
from typing import Any

_CTRL_LOG = logging.getLogger("popglobe.api.control")


def log_control_call(
    action: str,
    args: dict[str, Any] | None,
    started_at: float,
    status: str = "ok",
) -> None:
    """Emit one structured log line per control-surface call."""
    dur_ms = int((time.time() - started_at) * 1000)
    payload = {
        "event": "control_call",
        "action": action,
        "status": status,
        "duration_ms": dur_ms,
        "args": dict(args or {}),
    }
    _CTRL_LOG.info("%s", payload)
