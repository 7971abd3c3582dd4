"""
Storage backend abstraction and the JSON document-file implementation.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol

from tracker.errors import StorageFailure

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """
    Operations the stores need from persistence. Keys are already-derived
    storage keys and records are already-normalized plain dicts.
    """

    def load_collection(self, kind: str, key: str) -> list[dict]:
        ...

    def replace_collection(self, kind: str, key: str, records: list[dict]) -> None:
        ...

    def load_state(self, key: str) -> Optional[dict]:
        ...

    def upsert_state(self, key: str, state: dict) -> None:
        ...


# Keys that would not resolve to a directory of their own.
_DEGENERATE_KEYS = ("", ".", "..")


class FileStorageBackend:
    """
    One JSON document per user per collection:
    ``<data_dir>/users/<key>/{tasks,rewards,state}.json``.

    Every write replaces the whole document through a temp file and
    ``os.replace``, so readers see either the old or the new document.
    Concurrent writers are last-write-wins.
    """

    def __init__(self, data_dir: str | Path):
        self.root = Path(data_dir) / "users"

    def _partition_dir(self, key: str) -> Path:
        if key in _DEGENERATE_KEYS:
            # "~" never appears in a derived key.
            return self.root / f"~{key}"
        return self.root / key

    def _document_path(self, key: str, name: str) -> Path:
        return self._partition_dir(key) / f"{name}.json"

    def _read_document(self, path: Path) -> Any:
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError:
            return None
        except ValueError:
            # Not JSON, or not UTF-8.
            logger.warning("Unreadable document %s; treating as empty", path)
            return None
        except OSError as exc:
            raise StorageFailure(f"Failed to read {path}") from exc

    def _write_document(self, path: Path, payload: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(payload, handle, indent=2, ensure_ascii=False)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_path, path)
            except BaseException:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
                raise
        except OSError as exc:
            raise StorageFailure(f"Failed to write {path}") from exc

    def load_collection(self, kind: str, key: str) -> list[dict]:
        document = self._read_document(self._document_path(key, kind))
        return document if isinstance(document, list) else []

    def replace_collection(self, kind: str, key: str, records: list[dict]) -> None:
        self._write_document(self._document_path(key, kind), list(records))

    def load_state(self, key: str) -> Optional[dict]:
        document = self._read_document(self._document_path(key, "state"))
        return document if isinstance(document, dict) else None

    def upsert_state(self, key: str, state: dict) -> None:
        self._write_document(self._document_path(key, "state"), dict(state))

    def partition_keys(self) -> list[str]:
        """Storage keys of every partition that has been written to."""
        if not self.root.is_dir():
            return []
        keys = []
        for entry in sorted(self.root.iterdir()):
            if not entry.is_dir():
                continue
            name = entry.name
            if name.startswith("~"):
                name = name[1:]
            keys.append(name)
        return keys
