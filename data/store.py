# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""File-based key/value store for scorecard snapshots.

Each key is stored as its own JSON file inside a store directory. Team data
is saved under team-scoped keys (``home:grid``, ``away:players`` ...).

Usage::

    from data.store import JsonStore, team_key

    store = JsonStore()                      # uses default data/scorecards/ dir
    store = JsonStore("/tmp/scorecards")     # custom directory

    store.save(team_key("home", "teamName"), "Bears")
    name = store.load(team_key("home", "teamName"), "Home Team")
    store.delete(team_key("home", "teamName"))
    store.clear()                            # wipe every saved key

``load`` never raises: a missing, unreadable or corrupted entry returns the
caller's fallback, leaving shape repair to :mod:`ingestion`.
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
import shutil
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

TEAM_FIELDS = ("teamName", "players", "grid", "inningOuts")


# ---------------------------------------------------------------------------
# Key helpers
# ---------------------------------------------------------------------------

def team_key(team: str, field: str) -> str:
    """Build the store key for one field of one team's scorecard."""
    return f"{team}:{field}"


_SAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def key_filename(key: str) -> str:
    """Map a key to a filesystem-safe file name.

    Readable characters are kept so the directory can be browsed by hand; a
    short hash suffix keeps keys that sanitize to the same text apart.
    """
    readable = _SAFE_CHARS.sub("_", key).strip("_") or "key"
    digest = hashlib.sha256(key.encode()).hexdigest()[:8]
    return f"{readable}-{digest}.json"


# ---------------------------------------------------------------------------
# Store class
# ---------------------------------------------------------------------------

class JsonStore:
    """Persist JSON-serialisable values by key.

    Args:
        root_dir: Directory holding one file per key. Created on first
            write. Defaults to ``data/scorecards/`` next to this file.
    """

    def __init__(self, root_dir: str | Path | None = None) -> None:
        if root_dir is None:
            root_dir = Path(__file__).resolve().parent / "scorecards"
        self._root = Path(root_dir)

    # -- public API --------------------------------------------------------

    @property
    def root_dir(self) -> Path:
        return self._root

    def load(self, key: str, fallback: Any = None) -> Any:
        """Return the stored value for *key*, or *fallback*."""
        path = self._path_for(key)
        if not path.exists():
            return fallback
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            logger.warning("Unreadable store entry %s, using fallback", path.name)
            return fallback

    def save(self, key: str, value: Any) -> Path:
        """Write *value* for *key*, replacing any previous entry atomically."""
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(value, f, ensure_ascii=False, separators=(",", ":"))
        tmp_path.replace(path)  # atomic rename
        return path

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if path.exists():
            path.unlink()
            return True
        return False

    def has(self, key: str) -> bool:
        return self._path_for(key).exists()

    def clear(self) -> int:
        """Remove every entry. Returns the number of files deleted."""
        if not self._root.exists():
            return 0
        count = sum(1 for _ in self._root.glob("*.json"))
        shutil.rmtree(self._root)
        return count

    # -- helpers -----------------------------------------------------------

    def _path_for(self, key: str) -> Path:
        return self._root / key_filename(key)
