"""Character CRUD over the primary collection.

Every write rewrites the whole "characters" document. Mutations operate on
the raw stored entries so that a corrupt entry is never dropped as a side
effect of an unrelated write; only repair() compacts the collection.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from char_creator.errors import DuplicateError, NotFoundError, ValidationError
from char_creator.models import (
    IMMUTABLE_FIELDS,
    Character,
    SharedCharacter,
    new_id,
    now_iso,
)

from .core import CHARACTERS_KEY, StorageBackend, read_list
from .shared import SharedStore
from .versions import VersionStore

logger = logging.getLogger(__name__)

# Keys the store owns; callers cannot supply them on create or update.
_MANAGED_FIELDS = IMMUTABLE_FIELDS | {"updated_at"}


def _identity(name: str, gender: str, age: str) -> tuple[str, str, str]:
    return (name.strip().casefold(), gender, age)


def _validate(data: dict[str, Any]) -> Character:
    try:
        character = Character.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid character: {e}") from e
    if not character.name.strip():
        raise ValidationError("Name is required")
    return character


class CharacterStore:
    def __init__(
        self,
        backend: StorageBackend,
        versions: VersionStore,
        shared: SharedStore,
    ) -> None:
        self._backend = backend
        self.versions = versions
        self.shared = shared

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _raw(self) -> list[Any]:
        return read_list(self._backend, CHARACTERS_KEY)

    def _index(self, entries: list[Any], character_id: str) -> int | None:
        for i, entry in enumerate(entries):
            if isinstance(entry, dict) and entry.get("id") == character_id:
                return i
        return None

    def _fresh_id(self, entries: list[Any]) -> str:
        while True:
            candidate = new_id()
            if self._index(entries, candidate) is None and self.shared.get(candidate) is None:
                return candidate

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(self) -> list[Character]:
        """All valid characters in stored order. Corrupt entries are skipped."""
        characters = []
        for entry in self._raw():
            try:
                characters.append(Character.model_validate(entry))
            except PydanticValidationError:
                logger.warning("Skipping corrupt character entry (run repair to drop it)")
        return characters

    def get(self, character_id: str) -> Character | SharedCharacter | None:
        """Look up a primary character, falling back to shared clones."""
        for char in self.list():
            if char.id == character_id:
                return char
        return self.shared.get(character_id)

    def find_duplicate(self, name: str, gender: str, age: str) -> Character | None:
        wanted = _identity(name, gender, age)
        for char in self.list():
            if _identity(char.name, char.gender, char.age) == wanted:
                return char
        return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, data: dict[str, Any]) -> Character:
        """Create a character with a new id and timestamps.

        Raises DuplicateError if a character with the same name
        (case-insensitive), gender and age already exists.
        """
        fields = {k: v for k, v in data.items() if k not in _MANAGED_FIELDS}
        entries = self._raw()
        timestamp = now_iso()
        character = _validate({
            **fields,
            "id": self._fresh_id(entries),
            "created_at": timestamp,
            "updated_at": timestamp,
        })
        duplicate = self.find_duplicate(character.name, character.gender, character.age)
        if duplicate is not None:
            raise DuplicateError(
                f"Character '{character.name}' ({character.gender}, {character.age}) "
                f"already exists"
            )
        entries.append(character.model_dump())
        self._backend.write(CHARACTERS_KEY, entries)
        logger.info(f"Created character {character.id} ({character.name})")
        return character

    def update(self, character_id: str, fields: dict[str, Any]) -> Character:
        """Merge `fields` over a character, recording the prior state first.

        `id` and `created_at` are immutable and silently ignored. Raises
        NotFoundError if the id is not in the primary collection.
        """
        entries = self._raw()
        index = self._index(entries, character_id)
        if index is None:
            raise NotFoundError(f"Character {character_id} not found")
        try:
            prior = Character.model_validate(entries[index]).model_dump()
        except PydanticValidationError as e:
            raise ValidationError(f"Stored character {character_id} is corrupt") from e

        clean = {k: v for k, v in fields.items() if k not in _MANAGED_FIELDS}
        updated = _validate({**prior, **clean, "updated_at": now_iso()})
        after = updated.model_dump()
        changes = [k for k in clean if k in prior and prior[k] != after[k]]

        self.versions.record(character_id, prior, changes)
        entries[index] = after
        self._backend.write(CHARACTERS_KEY, entries)
        logger.debug(f"Updated character {character_id} changes={changes}")
        return updated

    def set_image(self, character_id: str, image_url: str | None) -> Character:
        """Attach an image reference without recording a version."""
        entries = self._raw()
        index = self._index(entries, character_id)
        if index is None:
            raise NotFoundError(f"Character {character_id} not found")
        entries[index]["image_url"] = image_url
        character = _validate(entries[index])
        self._backend.write(CHARACTERS_KEY, entries)
        return character

    def save(self, character: Character) -> None:
        """Overwrite a stored character by id as-is (no version, no checks)."""
        entries = self._raw()
        index = self._index(entries, character.id)
        if index is None:
            raise NotFoundError(f"Character {character.id} not found")
        entries[index] = character.model_dump()
        self._backend.write(CHARACTERS_KEY, entries)

    def delete(self, character_id: str) -> bool:
        """Remove from the primary collection. Versions, folder entries and
        relationship edges are left in place."""
        entries = self._raw()
        remaining = [
            e for e in entries
            if not (isinstance(e, dict) and e.get("id") == character_id)
        ]
        if len(remaining) == len(entries):
            return False
        self._backend.write(CHARACTERS_KEY, remaining)
        logger.info(f"Deleted character {character_id}")
        return True

    def repair(self) -> int:
        """Rewrite the collection without corrupt or repeated entries.

        Returns the number of entries dropped.
        """
        entries = self._raw()
        kept: list[dict[str, Any]] = []
        seen: set[str] = set()
        for entry in entries:
            try:
                char = Character.model_validate(entry)
            except PydanticValidationError:
                continue
            if char.id in seen:
                continue
            seen.add(char.id)
            kept.append(char.model_dump())
        dropped = len(entries) - len(kept)
        if dropped:
            logger.warning(f"Repair dropped {dropped} corrupt character entries")
            self._backend.write(CHARACTERS_KEY, kept)
        return dropped
