"""Typed relationships between characters.

Each pair is stored once, keyed "<low_id>|<high_id>", so writes and deletes
touch a single entry. adjacency() produces the mirrored per-character view
({a: {b: edge}, b: {a: edge}}) that graph consumers expect.

Edges referencing deleted characters are kept in storage and skipped by
build_graph().
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from char_creator.errors import ValidationError
from char_creator.models import (
    RELATIONSHIP_TYPES,
    Character,
    Relationship,
    ordered_pair,
    pair_key,
)

from .core import RELATIONSHIPS_KEY, StorageBackend, read_dict

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = "/default-avatar.png"


class RelationshipStore:
    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend

    def _load(self) -> dict[str, Relationship]:
        edges: dict[str, Relationship] = {}
        for key, raw in read_dict(self._backend, RELATIONSHIPS_KEY).items():
            try:
                edges[key] = Relationship.model_validate(raw)
            except PydanticValidationError:
                logger.warning(f"Skipping corrupt relationship {key}")
        return edges

    def _save(self, edges: dict[str, Relationship]) -> None:
        self._backend.write(
            RELATIONSHIPS_KEY, {key: e.model_dump() for key, e in edges.items()}
        )

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def list(self) -> list[Relationship]:
        return list(self._load().values())

    def get(self, a: str, b: str) -> Relationship | None:
        """The edge between two characters, in either order."""
        return self._load().get(pair_key(a, b))

    def set(
        self,
        a: str,
        b: str,
        type: str,
        description: str = "",
        custom_type: str | None = None,
    ) -> Relationship:
        """Create or overwrite the edge between `a` and `b`."""
        if a == b:
            raise ValidationError("A character cannot be related to itself")
        if type not in RELATIONSHIP_TYPES:
            raise ValidationError(f"Unknown relationship type '{type}'")
        if type == "custom":
            if not custom_type or not custom_type.strip():
                raise ValidationError("Custom relationships need a custom_type")
        else:
            custom_type = None
        low, high = ordered_pair(a, b)
        edge = Relationship(
            source_id=low,
            target_id=high,
            type=type,
            description=description,
            custom_type=custom_type,
        )
        edges = self._load()
        edges[edge.key] = edge
        self._save(edges)
        return edge

    def remove(self, a: str, b: str) -> bool:
        edges = self._load()
        if edges.pop(pair_key(a, b), None) is None:
            return False
        self._save(edges)
        return True

    def remove_all_for_character(self, character_id: str) -> int:
        """Delete every edge touching a character. Returns the count removed."""
        edges = self._load()
        remaining = {
            key: e for key, e in edges.items()
            if character_id not in (e.source_id, e.target_id)
        }
        removed = len(edges) - len(remaining)
        if removed:
            self._save(remaining)
        return removed

    def clear(self) -> None:
        self._backend.delete(RELATIONSHIPS_KEY)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def adjacency(self) -> dict[str, dict[str, dict[str, Any]]]:
        """Mirrored map: result[a][b] == result[b][a] for every stored edge."""
        view: dict[str, dict[str, dict[str, Any]]] = {}
        for edge in self._load().values():
            view.setdefault(edge.source_id, {})[edge.target_id] = edge.edge()
            view.setdefault(edge.target_id, {})[edge.source_id] = edge.edge()
        return view

    def for_character(self, character_id: str) -> dict[str, dict[str, Any]]:
        return self.adjacency().get(character_id, {})

    def build_graph(self, characters: Iterable[Character]) -> dict[str, list[dict[str, Any]]]:
        """Nodes for every character, links for every edge whose endpoints
        both still exist."""
        nodes = [
            {"id": c.id, "name": c.name, "image_url": c.image_url or DEFAULT_AVATAR}
            for c in characters
        ]
        known = {n["id"] for n in nodes}
        links = []
        for edge in self._load().values():
            if edge.source_id not in known or edge.target_id not in known:
                continue
            links.append({
                "source": edge.source_id,
                "target": edge.target_id,
                "type": edge.type,
                "label": edge.label(),
                "description": edge.description,
            })
        return {"nodes": nodes, "links": links}

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def repair(self) -> int:
        """Rewrite the edge map without malformed entries and under canonical
        keys. Returns the number of entries dropped."""
        raw = read_dict(self._backend, RELATIONSHIPS_KEY)
        kept: dict[str, Relationship] = {}
        for value in raw.values():
            try:
                edge = Relationship.model_validate(value)
            except PydanticValidationError:
                continue
            if edge.source_id == edge.target_id:
                continue
            low, high = ordered_pair(edge.source_id, edge.target_id)
            edge.source_id, edge.target_id = low, high
            kept[edge.key] = edge
        dropped = len(raw) - len(kept)
        if dropped or set(raw) != set(kept):
            self._save(kept)
        return dropped
