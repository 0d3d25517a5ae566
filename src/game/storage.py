# src/game/storage.py
from __future__ import annotations
import json
import logging
import os
import secrets
from pathlib import Path
from typing import Optional

from .config import BEST_SCORE_KEY, DATA_DIR_ENV

logger = logging.getLogger(__name__)


def data_dir() -> Path:
    """
    Directory for the persisted best scores.

    Override for tests/dev via `INFINITE_RUNNER_DATA_DIR`.
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".infinite_runner"


def best_score_path(variant: str, base: Optional[Path] = None) -> Path:
    return (base if base is not None else data_dir()) / f"{variant}_best.json"


class BestScoreStore:
    """
    One persisted integer. Any storage failure is logged once and the store
    falls back to memory for the rest of the process; gameplay never sees it.
    `path=None` means memory-only from the start.
    """
    def __init__(self, path: Optional[Path]):
        self.path = Path(path) if path is not None else None
        self.available = self.path is not None
        self._value = 0

    def load(self) -> int:
        if not self.available:
            return self._value
        p = self.path
        try:
            if not p.exists():
                return self._value
            payload = json.loads(p.read_text(encoding="utf-8"))
            value = int(payload.get(BEST_SCORE_KEY, 0)) if isinstance(payload, dict) else 0
        except (OSError, ValueError, TypeError, OverflowError) as e:  # inf/nan land here too
            self._degrade(f"unreadable best score file {p}: {e}")
            return self._value
        self._value = max(0, value)
        return self._value

    def save(self, score: int):
        self._value = int(score)
        if not self.available:
            return
        p = self.path
        tmp = None
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            tmp = p.with_name(f"{p.name}.{os.getpid()}.{secrets.token_hex(6)}.tmp")
            tmp.write_text(json.dumps({BEST_SCORE_KEY: self._value}) + "\n", encoding="utf-8")
            tmp.replace(p)
        except OSError as e:
            if tmp is not None:
                try:
                    tmp.unlink(missing_ok=True)
                except OSError as cleanup_err:
                    logger.debug("could not remove %s: %s", tmp, cleanup_err)
            self._degrade(f"cannot write best score to {p}: {e}")

    def _degrade(self, reason: str):
        logger.warning("%s; keeping best score in memory only", reason)
        self.available = False
