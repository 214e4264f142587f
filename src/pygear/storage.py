"""Persistent key-value namespaces.

Values are opaque strings; the repository layer owns serialization.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pygear.exceptions import GearStorageError

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Structural interface of a synchronous string key-value namespace.

    Having a protocol here makes it easy to inject test doubles or another
    backend while the repository layer stays unchanged.
    """

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryKeyValueStore:
    """Namespace held in a plain dict; lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileKeyValueStore:
    """Namespace persisted as a single JSON object in one UTF-8 file.

    The file is re-read on every access, so several stores (or processes)
    on one path see each other's writes. A write applies its change to the
    freshly read namespace and replaces the file atomically; the cached
    copy only changes once the new file is in place.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._data: dict[str, str] = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _reload(self) -> dict[str, str]:
        """Return the namespace as currently stored on disk."""
        self._data = self._read()
        return self._data

    def _read(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise GearStorageError(f"Cannot read {self._path}: {exc}") from exc
        if not text.strip():
            return {}
        try:
            loaded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise GearStorageError(f"{self._path} is not valid JSON: {exc}") from exc
        if not isinstance(loaded, dict):
            raise GearStorageError(f"{self._path} must hold a JSON object, got {type(loaded).__name__}")
        _logger.debug("Loaded %d keys from %s", len(loaded), self._path)
        return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in loaded.items()}

    def _commit(self, data: dict[str, str]) -> None:
        """Write ``data`` to disk and adopt it as the cached namespace."""
        payload = json.dumps(data, indent=2, ensure_ascii=False)
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise GearStorageError(f"Cannot write {self._path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
        self._data = data

    def get(self, key: str) -> str | None:
        return self._reload().get(key)

    def set(self, key: str, value: str) -> None:
        self._commit({**self._reload(), key: value})

    def remove(self, key: str) -> None:
        current = self._reload()
        if key not in current:
            return
        self._commit({k: v for k, v in current.items() if k != key})
