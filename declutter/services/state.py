"""Saving the latest execution log between CLI invocations.

The engine keeps its log in memory only. A command-line host exits after
each command, so it stores the log as JSON to let a later ``undo`` find it.
"""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..core.models import ExecutionLog


logger = logging.getLogger(__name__)

STATE_VERSION = 1


def default_state_path() -> Path:
    """``$XDG_STATE_HOME/declutter/last_run.json`` (``~/.local/state`` fallback)."""
    base = os.environ.get("XDG_STATE_HOME")
    root = Path(base) if base else Path.home() / ".local" / "state"
    return root / "declutter" / "last_run.json"


def save_log(log: ExecutionLog, path: Path) -> None:
    """Write a log, replacing any earlier one."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "version": STATE_VERSION,
        "saved_at": datetime.now().isoformat(timespec="seconds"),
        "log": log.to_dict(),
    }
    temp = path.with_suffix(path.suffix + ".tmp")
    with open(temp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    os.replace(temp, path)
    logger.debug("Saved undo log to %s", path)


def load_log(path: Path) -> Optional[ExecutionLog]:
    """Read a saved log; None when there is none."""
    if not path.exists():
        return None
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if data.get("version") != STATE_VERSION:
        raise ValueError(f"Unsupported undo log version in {path}: {data.get('version')}")
    return ExecutionLog.from_dict(data["log"])


def clear_log(path: Path) -> None:
    path.unlink(missing_ok=True)
