"""Storage backends, document keys, and slug utilities.

A backend maps a document key ("characters", "folders", ...) to one JSON
value. Stores always read the whole document, modify it in memory, and
write it back; there is no partial persistence.
"""

from __future__ import annotations

import copy
import json
import logging
import re
import unicodedata
from pathlib import Path
from typing import Any, Protocol

from char_creator.errors import StorageError

logger = logging.getLogger(__name__)

CHARACTERS_KEY = "characters"
VERSIONS_KEY = "versions"
SHARED_KEY = "shared-characters"
FOLDERS_KEY = "folders"
RELATIONSHIPS_KEY = "relationships"
RATING_STATUS_KEY = "rating-status"
CONFIG_KEY = "config"


def slugify(title: str) -> str:
    """Convert a title to a filesystem-safe slug.

    "Aria the Bold" → "aria-the-bold"
    """
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)  # strip apostrophes/quotes before hyphenation
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or "untitled"


# ---------------------------------------------------------------------------
# Protocol: every backend must match these signatures
# ---------------------------------------------------------------------------

class StorageBackend(Protocol):
    def read(self, key: str) -> Any | None: ...

    def write(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


# ---------------------------------------------------------------------------
# JsonFileBackend: one <key>.json file per document
# ---------------------------------------------------------------------------

class JsonFileBackend:
    """Persists each document as pretty-printed JSON under a data directory.

    Args:
        data_dir: Directory holding the documents. Created if missing.
    """

    def __init__(self, data_dir: Path) -> None:
        self._dir = Path(data_dir)
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def data_dir(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def read(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.is_file():
            return None
        try:
            return json.loads(path.read_text())
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {path.name}: {e}") from e

    def write(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            path.write_text(json.dumps(value, indent=2))
        except (OSError, TypeError) as e:
            raise StorageError(f"Cannot write {path.name}: {e}") from e
        logger.debug(f"Wrote {path.name}")

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.is_file():
            path.unlink()


# ---------------------------------------------------------------------------
# MemoryBackend: dict-backed, for tests and throwaway sessions
# ---------------------------------------------------------------------------

class MemoryBackend:
    """Keeps documents in a dict. Values are deep-copied in and out so
    callers cannot mutate stored state without a write, matching the file
    backend's semantics."""

    def __init__(self) -> None:
        self.documents: dict[str, Any] = {}

    def read(self, key: str) -> Any | None:
        if key not in self.documents:
            return None
        return copy.deepcopy(self.documents[key])

    def write(self, key: str, value: Any) -> None:
        try:
            json.dumps(value)
        except TypeError as e:
            raise StorageError(f"Cannot serialize {key}: {e}") from e
        self.documents[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self.documents.pop(key, None)


def read_list(backend: StorageBackend, key: str) -> list[Any]:
    """Read a list document. Returns [] if missing."""
    value = backend.read(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise StorageError(f"Document '{key}' is not a list")
    return value


def read_dict(backend: StorageBackend, key: str) -> dict[str, Any]:
    """Read a mapping document. Returns {} if missing."""
    value = backend.read(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise StorageError(f"Document '{key}' is not an object")
    return value
