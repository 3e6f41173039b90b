"""CharacterLibrary: every store wired onto one backend.

The HTTP app, the MCP server and the CLI each build one library and pass it
around explicitly; nothing reads storage through module globals.

Deletion policy is lazy: deleting a character leaves its versions, folder
entries and relationship edges in place. Readers filter dangling ids
(build_graph, relationship_graph) and repair() compacts corrupt data.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from char_creator.errors import NotFoundError
from char_creator.models import Character, Ratings, SharedCharacter
from char_creator.statistics import compute_statistics

from . import config as _config
from .characters import CharacterStore
from .core import JsonFileBackend, MemoryBackend, StorageBackend
from .folders import FolderStore
from .ratings import RatingStore
from .relationships import RelationshipStore
from .shared import SharedStore
from .templates import get_template, list_templates
from .versions import VersionStore

logger = logging.getLogger(__name__)


class CharacterLibrary:
    def __init__(self, backend: StorageBackend, templates_dir: Path | None = None) -> None:
        self.backend = backend
        self.templates_dir = templates_dir
        self.versions = VersionStore(backend)
        self.shared = SharedStore(backend)
        self.characters = CharacterStore(backend, self.versions, self.shared)
        self.folders = FolderStore(backend)
        self.relationships = RelationshipStore(backend)
        self.ratings = RatingStore(backend, self.characters)

    @classmethod
    def open(cls, data_dir: Path, templates_dir: Path | None = None) -> CharacterLibrary:
        """Library persisted as JSON files under `data_dir`."""
        return cls(JsonFileBackend(data_dir), templates_dir)

    @classmethod
    def in_memory(cls, templates_dir: Path | None = None) -> CharacterLibrary:
        return cls(MemoryBackend(), templates_dir)

    # ------------------------------------------------------------------
    # Cross-store operations
    # ------------------------------------------------------------------

    def require(self, character_id: str) -> Character:
        character = self.characters.get(character_id)
        if character is None:
            raise NotFoundError(f"Character {character_id} not found")
        return character

    def delete_character(self, character_id: str) -> bool:
        return self.characters.delete(character_id)

    def restore_version(self, character_id: str, version_id: str) -> Character:
        """Apply a prior snapshot as a regular update.

        History grows by one entry; it is never truncated. Rating counters
        are not rolled back.
        """
        version = self.versions.get(character_id, version_id)
        if version is None:
            raise NotFoundError(f"Version {version_id} not found for {character_id}")
        data = {k: v for k, v in version.data.items() if k != "ratings"}
        return self.characters.update(character_id, data)

    def share(self, character_id: str) -> SharedCharacter:
        return self.shared.share(self.require(character_id))

    def rate(self, character_id: str, rating: str) -> Ratings:
        return self.ratings.rate(character_id, rating)

    def resync_folders(self) -> int:
        return self.folders.resync(self.characters.list())

    def relationship_graph(self) -> dict[str, list[dict[str, Any]]]:
        return self.relationships.build_graph(self.characters.list())

    def statistics(self, top_n: int = 10) -> dict[str, Any]:
        return compute_statistics(self.characters.list(), self.versions.all(), top_n)

    def repair(self) -> dict[str, int]:
        """Compact corrupt entries. Returns dropped counts per collection."""
        report = {
            "characters": self.characters.repair(),
            "versions": self.versions.repair(),
            "folders": self.folders.repair(),
            "relationships": self.relationships.repair(),
        }
        if any(report.values()):
            logger.warning(f"Repair removed corrupt entries: {report}")
        return report

    # ------------------------------------------------------------------
    # Templates and settings
    # ------------------------------------------------------------------

    def list_templates(self) -> list[dict[str, Any]]:
        if self.templates_dir is None:
            return []
        return list_templates(self.templates_dir)

    def get_template(self, template_id: str) -> dict[str, Any] | None:
        if self.templates_dir is None:
            return None
        return get_template(self.templates_dir, template_id)

    def get_config(self) -> dict[str, Any]:
        return _config.get_config(self.backend)

    def update_config(self, fields: dict[str, Any]) -> dict[str, Any]:
        return _config.update_config(self.backend, fields)
