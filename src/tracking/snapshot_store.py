"""Load/save the persisted pool result snapshot (JSON)."""

from __future__ import annotations

import json
import logging
import os
from typing import Optional

from config import settings
from core import filesystem
from domain.models import PoolResult

log = logging.getLogger(__name__)


class SnapshotError(RuntimeError):
    """Raised when an existing snapshot cannot be read or parsed."""


def _path(path: str | None) -> str:
    return path or settings.results_path()


def load_snapshot(path: str | None = None) -> Optional[PoolResult]:
    """Previous snapshot, or None on a first run (file absent).

    A file that exists but cannot be parsed raises :class:`SnapshotError`;
    treating it as a first run would disable the monotonic check.
    """
    p = _path(path)
    if not os.path.exists(p):
        log.info("No previous snapshot at %s (first run)", p)
        return None
    try:
        raw = json.loads(filesystem.read_text(p))
    except (OSError, json.JSONDecodeError) as e:
        raise SnapshotError(f"Snapshot unreadable: {p}: {e}") from e
    if not isinstance(raw, dict):
        raise SnapshotError(f"Snapshot must contain a JSON object: {p}")
    try:
        return PoolResult.from_dict(raw)
    except (AttributeError, TypeError) as e:
        raise SnapshotError(f"Snapshot has an unexpected shape: {p}: {e}") from e


def save_snapshot(result: PoolResult, path: str | None = None) -> str:
    p = _path(path)
    payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    filesystem.write_text_atomic(p, payload + "\n")
    log.info("Snapshot written to %s", p)
    return p
