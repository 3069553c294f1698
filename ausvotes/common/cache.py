"""Explicit per-family table cache with optional on-disk persistence."""

from __future__ import annotations

import hashlib
import re
from pathlib import Path
from typing import Any, Mapping

import pandas as pd

from ausvotes.common.fs import ensure_dir
from ausvotes.common.logging import get_logger

logger = get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def cache_key(*parts: object) -> str:
    return "|".join(str(part) for part in parts)


def _digest(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()[:12]


def _slug(key: str) -> str:
    safe = _UNSAFE_KEY_CHARS.sub("-", key)[:60]
    return f"{safe}-{_digest(key)}"


def options_token(options: Mapping[str, Any] | None) -> str:
    """Stable text for keyword options; tables are reduced to a digest of their contents."""
    if not options:
        return "no-options"
    parts = []
    for name in sorted(options):
        value = options[name]
        if isinstance(value, pd.DataFrame):
            value = f"table:{_digest(value.to_csv(index=False))}"
        parts.append(f"{name}={value}")
    return ",".join(parts)


class TableCache:
    """Tables keyed by query parameters for one dataset family.

    Entries live until ``clear`` is called. When ``directory`` is given each
    entry is also pickled there so later runs can reuse it.
    """

    def __init__(self, family: str, directory: Path | None = None) -> None:
        self.family = family
        self.directory = directory
        self._entries: dict[str, pd.DataFrame] = {}

    def _path(self, key: str) -> Path | None:
        if self.directory is None:
            return None
        return self.directory / f"{_slug(key)}.pkl"

    def __contains__(self, key: str) -> bool:
        if key in self._entries:
            return True
        path = self._path(key)
        return path is not None and path.exists()

    def __len__(self) -> int:
        return len(self._stored_keys())

    def _stored_keys(self) -> set[str]:
        keys = {_slug(key) for key in self._entries}
        if self.directory is not None and self.directory.exists():
            keys.update(path.stem for path in self.directory.glob("*.pkl"))
        return keys

    def get(self, key: str) -> pd.DataFrame | None:
        table = self._entries.get(key)
        if table is None:
            path = self._path(key)
            if path is None or not path.exists():
                return None
            table = pd.read_pickle(path)
            self._entries[key] = table
        logger.info(f"Using cached `{self.family}` data for {key}", extra={"family": self.family})
        return table.copy()

    def set(self, key: str, table: pd.DataFrame) -> None:
        self._entries[key] = table.copy()
        path = self._path(key)
        if path is not None:
            ensure_dir(path.parent)
            table.to_pickle(path)

    def clear(self) -> int:
        count = len(self._stored_keys())
        self._entries.clear()
        if self.directory is not None and self.directory.exists():
            for path in self.directory.glob("*.pkl"):
                path.unlink()
        if count:
            logger.info(f"Cleared {count} cached {self.family} dataset(s).", extra={"family": self.family})
        else:
            logger.info(f"No cached {self.family} data found.", extra={"family": self.family})
        return count


class CacheRegistry:
    """Creates one ``TableCache`` per family on first use."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory
        self._caches: dict[str, TableCache] = {}

    def for_family(self, family: str) -> TableCache:
        cache = self._caches.get(family)
        if cache is None:
            family_dir = self.directory / family if self.directory is not None else None
            cache = TableCache(family, family_dir)
            self._caches[family] = cache
        return cache

    def families(self) -> list[str]:
        names = set(self._caches)
        if self.directory is not None and self.directory.exists():
            names.update(path.name for path in self.directory.iterdir() if path.is_dir())
        return sorted(names)

    def clear(self, family: str | None = None) -> int:
        targets = [family] if family is not None else self.families()
        if not targets:
            logger.info("No cached data found.")
            return 0
        return sum(self.for_family(name).clear() for name in targets)
