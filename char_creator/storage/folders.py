"""Folders: named groupings of denormalized character summaries.

A folder's character list is a cache, not a foreign key. Entries are
copies of (id, name, image_url) taken when the character was added; call
resync() to refresh them from the canonical characters.

Folders failing the structural check are dropped whenever the folder list
is loaded or saved.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from char_creator.errors import ValidationError
from char_creator.models import Character, Folder, FolderEntry, new_id

from .core import FOLDERS_KEY, StorageBackend, read_list

logger = logging.getLogger(__name__)


def _is_valid_entry(raw: Any) -> bool:
    return (
        isinstance(raw, dict)
        and isinstance(raw.get("id"), str)
        and isinstance(raw.get("name"), str)
        and isinstance(raw.get("image_url"), (str, type(None)))
    )


def is_valid_folder(raw: Any) -> bool:
    """Shape check: string id and name, and a list of entries that each
    carry a string id and name and a string or null image_url."""
    return (
        isinstance(raw, dict)
        and isinstance(raw.get("id"), str)
        and isinstance(raw.get("name"), str)
        and isinstance(raw.get("characters"), list)
        and all(_is_valid_entry(c) for c in raw["characters"])
    )


def _entry(summary: Character | FolderEntry | dict[str, Any]) -> FolderEntry:
    if isinstance(summary, FolderEntry):
        return summary
    if isinstance(summary, Character):
        return FolderEntry(id=summary.id, name=summary.name, image_url=summary.image_url)
    if not _is_valid_entry(summary):
        raise ValidationError("Folder entry needs a string id, name and image_url")
    return FolderEntry(
        id=summary["id"], name=summary["name"], image_url=summary.get("image_url")
    )


def _reordered(items: list, ids: list[str], what: str) -> list:
    by_id = {item.id: item for item in items}
    if len(ids) != len(by_id) or set(ids) != set(by_id):
        raise ValidationError(f"New {what} order must list every current id exactly once")
    return [by_id[i] for i in ids]


class FolderStore:
    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend

    # ------------------------------------------------------------------
    # Load / save with structural filtering
    # ------------------------------------------------------------------

    def _load(self) -> list[Folder]:
        folders = []
        for raw in read_list(self._backend, FOLDERS_KEY):
            if not is_valid_folder(raw):
                logger.warning("Dropping corrupt folder entry on load")
                continue
            try:
                folders.append(Folder.model_validate(raw))
            except PydanticValidationError:
                logger.warning(f"Dropping corrupt folder {raw['id']} on load")
        return folders

    def _save(self, folders: list[Folder]) -> None:
        data = [f.model_dump() for f in folders]
        self._backend.write(FOLDERS_KEY, [f for f in data if is_valid_folder(f)])

    def _find(self, folders: list[Folder], folder_id: str) -> Folder | None:
        for folder in folders:
            if folder.id == folder_id:
                return folder
        return None

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def list(self, include_empty: bool = False) -> list[Folder]:
        """Folders for display. Empty folders are hidden unless requested;
        they stay in storage until deleted."""
        folders = self._load()
        if include_empty:
            return folders
        return [f for f in folders if f.characters]

    def get(self, folder_id: str) -> Folder | None:
        return self._find(self._load(), folder_id)

    def create(self, name: str) -> Folder:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Folder name is required")
        folders = self._load()
        folder = Folder(id=f"folder_{new_id()}", name=name, characters=[])
        folders.append(folder)
        self._save(folders)
        return folder

    def rename(self, folder_id: str, new_name: str) -> bool:
        if not isinstance(new_name, str) or not new_name.strip():
            raise ValidationError("Folder name is required")
        folders = self._load()
        folder = self._find(folders, folder_id)
        if folder is None:
            return False
        folder.name = new_name
        self._save(folders)
        return True

    def delete(self, folder_id: str) -> bool:
        """Delete a folder. Its characters are untouched."""
        folders = self._load()
        remaining = [f for f in folders if f.id != folder_id]
        if len(remaining) == len(folders):
            return False
        self._save(remaining)
        return True

    def reorder_folders(self, folder_ids: list[str]) -> bool:
        folders = self._load()
        self._save(_reordered(folders, folder_ids, "folder"))
        return True

    def clear(self) -> None:
        self._backend.delete(FOLDERS_KEY)

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def add_character(
        self, folder_id: str, summary: Character | FolderEntry | dict[str, Any]
    ) -> bool:
        """Add a summary copy to a folder. Adding an id already present is a
        no-op. Returns False if the folder does not exist."""
        entry = _entry(summary)
        folders = self._load()
        folder = self._find(folders, folder_id)
        if folder is None:
            return False
        if not folder.has(entry.id):
            folder.characters.append(entry)
            self._save(folders)
        return True

    def remove_character(self, folder_id: str, character_id: str) -> bool:
        folders = self._load()
        folder = self._find(folders, folder_id)
        if folder is None or not folder.has(character_id):
            return False
        folder.characters = [c for c in folder.characters if c.id != character_id]
        self._save(folders)
        return True

    def move_character(
        self,
        character_id: str,
        from_folder_id: str,
        to_folder_id: str,
        index: int | None = None,
    ) -> bool:
        """Move an entry between folders, or to `index` within one folder.

        The destination receives the source's copy of the entry. Returns
        False if either folder or the entry is missing.
        """
        folders = self._load()
        source = self._find(folders, from_folder_id)
        target = self._find(folders, to_folder_id)
        if source is None or target is None:
            return False
        entry = next((c for c in source.characters if c.id == character_id), None)
        if entry is None:
            return False

        source.characters = [c for c in source.characters if c.id != character_id]
        if target is source or not target.has(character_id):
            position = len(target.characters) if index is None else index
            position = max(0, min(position, len(target.characters)))
            target.characters.insert(position, entry)
        self._save(folders)
        return True

    def reorder(self, folder_id: str, character_ids: list[str]) -> bool:
        """Replace a folder's entry order. `character_ids` must be a
        permutation of the current entry ids."""
        folders = self._load()
        folder = self._find(folders, folder_id)
        if folder is None:
            return False
        folder.characters = _reordered(folder.characters, character_ids, "character")
        self._save(folders)
        return True

    def folders_for_character(self, character_id: str) -> list[Folder]:
        return [f for f in self._load() if f.has(character_id)]

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def resync(self, characters: Iterable[Character]) -> int:
        """Refresh denormalized names and images from canonical characters.

        Entries whose character no longer exists are left alone. Returns the
        number of entries changed.
        """
        by_id = {c.id: c for c in characters}
        folders = self._load()
        changed = 0
        for folder in folders:
            for entry in folder.characters:
                char = by_id.get(entry.id)
                if char is None:
                    continue
                if entry.name != char.name or entry.image_url != char.image_url:
                    entry.name = char.name
                    entry.image_url = char.image_url
                    changed += 1
        if changed:
            self._save(folders)
        return changed

    def repair(self) -> int:
        """Rewrite the stored list without corrupt folders. Returns the
        number dropped."""
        raw = read_list(self._backend, FOLDERS_KEY)
        folders = self._load()
        dropped = len(raw) - len(folders)
        if dropped:
            self._save(folders)
        return dropped
