"""Shared (publicly viewable) character clones."""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from char_creator.models import Character, SharedCharacter, new_id, now_iso

from .core import SHARED_KEY, StorageBackend, read_list

logger = logging.getLogger(__name__)


class SharedStore:
    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend

    def list(self) -> list[SharedCharacter]:
        shared = []
        for entry in read_list(self._backend, SHARED_KEY):
            try:
                shared.append(SharedCharacter.model_validate(entry))
            except PydanticValidationError:
                logger.warning("Skipping corrupt shared character entry")
        return shared

    def get(self, shared_id: str) -> SharedCharacter | None:
        for char in self.list():
            if char.id == shared_id:
                return char
        return None

    def share(self, character: Character) -> SharedCharacter:
        """Clone a character under a fresh id. The owner's record is untouched."""
        data = character.model_dump(
            exclude={"id", "created_at", "updated_at", "is_shared", "original_id"}
        )
        timestamp = now_iso()
        clone = SharedCharacter(
            **data,
            id=new_id(),
            created_at=timestamp,
            updated_at=timestamp,
            original_id=character.id,
        )
        entries = read_list(self._backend, SHARED_KEY)
        entries.append(clone.model_dump())
        self._backend.write(SHARED_KEY, entries)
        logger.info(f"Shared character {character.id} as {clone.id}")
        return clone

    def save(self, clone: SharedCharacter) -> None:
        """Overwrite a stored clone by id (used for rating counters)."""
        entries = read_list(self._backend, SHARED_KEY)
        for i, entry in enumerate(entries):
            if isinstance(entry, dict) and entry.get("id") == clone.id:
                entries[i] = clone.model_dump()
                break
        else:
            entries.append(clone.model_dump())
        self._backend.write(SHARED_KEY, entries)
