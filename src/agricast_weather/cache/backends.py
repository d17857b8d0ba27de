"""Document-store backends for the cache-aside layer."""

from __future__ import annotations

import copy
import json
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..exceptions import CacheUnavailableError


class CacheBackend(ABC):
    """Key/document persistence contract used by CacheStore."""

    @abstractmethod
    def read(self, key: str) -> dict[str, Any] | None:
        """Return the stored document for `key`, or None when absent."""

    @abstractmethod
    def write(self, key: str, document: dict[str, Any]) -> None:
        """Store `document` under `key`, replacing any existing document."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the document for `key` if present."""


class InMemoryCacheBackend(CacheBackend):
    """Process-local backend, used for tests and the `memory` cache mode."""

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}

    def read(self, key: str) -> dict[str, Any] | None:
        document = self._documents.get(key)
        return copy.deepcopy(document) if document is not None else None

    def write(self, key: str, document: dict[str, Any]) -> None:
        self._documents[key] = copy.deepcopy(document)

    def delete(self, key: str) -> None:
        self._documents.pop(key, None)

    def __len__(self) -> int:
        return len(self._documents)


class JsonFileCacheBackend(CacheBackend):
    """Stores one JSON document per key under a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path_for(self, key: str) -> Path:
        safe_name = "".join(ch if ch.isalnum() or ch in {"-", "_", "."} else "_" for ch in key)
        return self.directory / f"{safe_name}.json"

    def read(self, key: str) -> dict[str, Any] | None:
        path = self._path_for(key)
        try:
            with path.open("r", encoding="utf-8") as fh:
                document = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            raise CacheUnavailableError(f"Failed reading cache document {path}: {exc}") from exc
        if not isinstance(document, dict):
            raise CacheUnavailableError(
                f"Cache document {path} has unexpected type {type(document).__name__}."
            )
        return document

    def write(self, key: str, document: dict[str, Any]) -> None:
        path = self._path_for(key)
        tmp_path: Path | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # One temp file per writer.
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.directory,
                prefix=f"{path.stem}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_path = Path(fh.name)
                json.dump(document, fh, ensure_ascii=False)
                fh.write("\n")
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise CacheUnavailableError(f"Failed writing cache document {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise CacheUnavailableError(f"Failed deleting cache document {path}: {exc}") from exc
