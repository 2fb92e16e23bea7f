"""Append-only debug log shared by the stores and the terminal app."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pdv import config


def log_debug(message: str) -> None:
    try:
        ts = datetime.now(timezone.utc).isoformat()
        path = Path(config.DEBUG_LOG_PATH)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as fh:
            fh.write(f"{ts} {message}\n")
    except Exception:
        # Logging must never interfere with app flow.
        return
