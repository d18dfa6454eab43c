"""Loading and caching of ``.jshintrc`` configuration files.

A config file is JSON with ``/* */`` and ``//`` comments allowed. Files are
re-read only when their stat snapshot (device, inode, size, mtime in
nanoseconds) differs from the one recorded at the previous load.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"//[^\n\r]*")


class ConfigError(ValueError):
    """Raised when a config file does not hold a JSON object."""


class StatSnapshot(NamedTuple):
    dev: int
    ino: int
    size: int
    mtime_ns: int

    @classmethod
    def from_stat(cls, st: os.stat_result) -> StatSnapshot:
        return cls(dev=st.st_dev, ino=st.st_ino, size=st.st_size, mtime_ns=st.st_mtime_ns)


@dataclass
class CacheEntry:
    config: dict[str, Any] = field(default_factory=dict)
    stat: StatSnapshot | None = None


def strip_comments(text: str) -> str:
    """Remove ``/* ... */`` (non-greedy, multi-line) and ``// ...`` comments."""
    text = _BLOCK_COMMENT_RE.sub("", text or "")
    return _LINE_COMMENT_RE.sub("", text)


def parse_config(text: str) -> dict[str, Any]:
    try:
        data = json.loads(strip_comments(text))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"expected a JSON object, got {type(data).__name__}")
    return data


class ConfigCache:
    """Process-wide map from config path to the last configuration loaded.

    Entries are never evicted. Not thread-safe; requests are served one at a
    time on the event loop.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, path: str | None) -> dict[str, Any]:
        """Return the configuration for ``path``, reloading it if the file changed."""
        if not path:
            return {}
        prev = self._entries.get(path) or CacheEntry()
        entry = self._refresh(path, prev)
        self._entries[path] = entry
        return entry.config

    def clear(self) -> None:
        self._entries.clear()

    def _refresh(self, path: str, prev: CacheEntry) -> CacheEntry:
        try:
            fh = open(path, encoding="utf-8")  # noqa: SIM115
        except OSError as exc:
            logger.warning("Could not load jshintrc %s: %s", path, exc)
            return prev

        with fh:
            try:
                stat = StatSnapshot.from_stat(os.fstat(fh.fileno()))
            except OSError as exc:
                logger.warning("Could not load jshintrc %s: %s", path, exc)
                return prev

            if stat == prev.stat:
                return prev

            try:
                config = parse_config(fh.read())
            except (OSError, UnicodeDecodeError, ConfigError) as exc:
                logger.warning("Could not load jshintrc %s: %s", path, exc)
                # Keep the old config but remember the new stat so a broken
                # file is not re-parsed on every request.
                return CacheEntry(config=prev.config, stat=stat)

        logger.info("Loading jshintrc: %s", path)
        return CacheEntry(config=config, stat=stat)
