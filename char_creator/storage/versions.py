"""Append-only version history per character.

A character whose stored history is not a list is corrupt: list() treats it
as empty, and record() refuses to write over it (StorageError) so a new
snapshot never silently replaces the old history. repair() resets it.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from char_creator.errors import StorageError
from char_creator.models import Version

from .core import VERSIONS_KEY, StorageBackend, read_dict

logger = logging.getLogger(__name__)


class VersionStore:
    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend

    def record(
        self, character_id: str, prior: dict[str, Any], changes: list[str]
    ) -> Version:
        """Append a snapshot of `prior` to the character's history."""
        history = read_dict(self._backend, VERSIONS_KEY)
        entries = history.setdefault(character_id, [])
        if not isinstance(entries, list):
            raise StorageError(f"Version history for {character_id} is not a list")
        version = Version(data=prior, changes=list(changes))
        entries.append(version.model_dump())
        self._backend.write(VERSIONS_KEY, history)
        return version

    def list(self, character_id: str) -> list[Version]:
        """Versions in insertion order (oldest first). Returns [] if none."""
        raw = read_dict(self._backend, VERSIONS_KEY).get(character_id, [])
        if not isinstance(raw, list):
            logger.warning(f"Ignoring corrupt version history for character {character_id}")
            return []
        versions = []
        for entry in raw:
            try:
                versions.append(Version.model_validate(entry))
            except PydanticValidationError:
                logger.warning(f"Skipping corrupt version for character {character_id}")
        return versions

    def get(self, character_id: str, version_id: str) -> Version | None:
        for version in self.list(character_id):
            if version.id == version_id:
                return version
        return None

    def all(self) -> dict[str, list[Version]]:
        """Every character's history, keyed by character id."""
        return {
            character_id: self.list(character_id)
            for character_id in read_dict(self._backend, VERSIONS_KEY)
        }

    def repair(self) -> int:
        """Drop corrupt versions and reset non-list histories. Returns the
        number of entries dropped (a non-list history counts as one)."""
        raw = read_dict(self._backend, VERSIONS_KEY)
        kept: dict[str, list[dict[str, Any]]] = {}
        dropped = 0
        for character_id, entries in raw.items():
            if not isinstance(entries, list):
                dropped += 1
                continue
            valid = []
            for entry in entries:
                try:
                    valid.append(Version.model_validate(entry).model_dump())
                except PydanticValidationError:
                    dropped += 1
            kept[character_id] = valid
        if dropped:
            self._backend.write(VERSIONS_KEY, kept)
            logger.warning(f"Repair dropped {dropped} corrupt version entries")
        return dropped
