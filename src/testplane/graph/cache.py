"""Persisted memoization of inferred targets.

One JSON file per plugin option set:
    <workspace_data_directory>/<plugin>-<optionsHash>.hash

The file maps memoization keys (content hashes) to ``{targets, metadata}``.
It is loaded once per inference batch and rewritten in full at the end.
"""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from testplane.core.logging import get_logger
from testplane.graph.models import ProjectTargets

log = get_logger(__name__)


def targets_cache_path(data_directory: Path, plugin: str, options_hash: str) -> Path:
    return data_directory / f"{plugin}-{options_hash}.hash"


class TargetsCache:
    """Thread-safe key -> ProjectTargets map backed by a JSON file.

    Concurrent writers for the same key are last-writer-wins; identical keys
    always produce identical values, so no update is lost.

    Only entries read or written since loading are saved, so keys left behind
    by edited or removed projects drop out after one batch.
    """

    def __init__(self, path: Path, entries: dict[str, ProjectTargets] | None = None) -> None:
        self.path = path
        self._entries: dict[str, ProjectTargets] = dict(entries or {})
        self._touched: set[str] = set()
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path: Path) -> TargetsCache:
        """Load the store, starting empty when the file is missing or unreadable."""
        if not path.exists():
            return cls(path)
        try:
            raw: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
            entries = {key: ProjectTargets.model_validate(value) for key, value in raw.items()}
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            log.warning("targets_cache_unreadable", path=str(path), error=str(e))
            return cls(path)
        log.debug("targets_cache_loaded", path=str(path), entries=len(entries))
        return cls(path, entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> ProjectTargets | None:
        with self._lock:
            value = self._entries.get(key)
            if value is not None:
                self._touched.add(key)
            return value

    def set(self, key: str, value: ProjectTargets) -> None:
        with self._lock:
            self._entries[key] = value
            self._touched.add(key)

    def get_or_compute(self, key: str, compute: Callable[[], ProjectTargets]) -> ProjectTargets:
        """Return the cached value for ``key``, computing and storing it on a miss.

        ``compute`` runs outside the lock so slow filesystem walks for
        different projects do not serialize.
        """
        cached = self.get(key)
        if cached is not None:
            log.debug("targets_cache_hit", key=key[:12])
            return cached
        log.debug("targets_cache_miss", key=key[:12])
        value = compute()
        self.set(key, value)
        return value

    def save(self) -> None:
        """Rewrite the store atomically with the entries used since loading."""
        with self._lock:
            payload = {
                key: value.to_json_dict()
                for key, value in self._entries.items()
                if key in self._touched
            }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(f"{self.path.name}.{os.getpid()}.tmp")
        try:
            tmp.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
            tmp.replace(self.path)
        finally:
            tmp.unlink(missing_ok=True)
        log.debug("targets_cache_saved", path=str(self.path), entries=len(payload))
