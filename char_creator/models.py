"""Core domain models.

Every store reads and writes these types. Pydantic validates records at the
storage boundary, so a document that no longer matches its model is treated
as corrupt and skipped on load.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Descriptive text fields, in the order the editor form presents them.
CHARACTER_FIELDS: tuple[str, ...] = (
    "name",
    "gender",
    "age",
    "description",
    "personality",
    "scenario",
    "greeting",
    "interests",
    "background",
    "height",
    "language",
    "status",
    "occupation",
    "skills",
    "appearance",
    "figure",
    "attributes",
    "species",
    "habits",
    "likes",
    "dislikes",
)

# Fields a caller may never overwrite through update().
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})

RatingValue = Literal["like", "dislike"]

RELATIONSHIP_TYPES: dict[str, str] = {
    "friend": "Friend",
    "family": "Family",
    "enemy": "Enemy",
    "mentor": "Mentor",
    "student": "Student",
    "ally": "Ally",
    "lover": "Lover",
    "pet": "Pet",
    "acquaintance": "Acquaintance",
    "teammate": "Teammate",
    "custom": "Custom",
}


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return uuid.uuid4().hex


class Ratings(BaseModel):
    likes: int = 0
    dislikes: int = 0


class Character(BaseModel):
    """A user-authored persona record."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(default_factory=new_id)
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)
    image_url: str | None = None
    ratings: Ratings = Field(default_factory=Ratings)

    name: str = ""
    gender: str = ""
    age: str = ""
    description: str = ""
    personality: str = ""
    scenario: str = ""
    greeting: str = ""
    interests: str = ""
    background: str = ""
    height: str = ""
    language: str = ""
    status: str = ""
    occupation: str = ""
    skills: str = ""
    appearance: str = ""
    figure: str = ""
    attributes: str = ""
    species: str = ""
    habits: str = ""
    likes: str = ""
    dislikes: str = ""

    def text_fields(self) -> dict[str, str]:
        """Just the descriptive text fields."""
        return {name: getattr(self, name) for name in CHARACTER_FIELDS}


class SharedCharacter(Character):
    """A read-only public clone of a character, reachable by its own id."""

    is_shared: bool = True
    original_id: str


class Version(BaseModel):
    """Immutable snapshot of a character's state before an update."""

    id: str = Field(default_factory=new_id)
    data: dict[str, Any]
    changes: list[str] = Field(default_factory=list)
    timestamp: str = Field(default_factory=now_iso)


class FolderEntry(BaseModel):
    """Denormalized copy of the character data a folder displays."""

    id: str
    name: str
    image_url: str | None = None


class Folder(BaseModel):
    id: str
    name: str
    characters: list[FolderEntry] = Field(default_factory=list)

    def has(self, character_id: str) -> bool:
        return any(c.id == character_id for c in self.characters)


class Relationship(BaseModel):
    """An undirected, typed edge between two characters.

    Stored once per pair with source_id < target_id, so there is never a
    second direction to keep in sync.
    """

    source_id: str
    target_id: str
    type: str
    description: str = ""
    custom_type: str | None = None

    @property
    def key(self) -> str:
        return pair_key(self.source_id, self.target_id)

    def other(self, character_id: str) -> str:
        return self.target_id if character_id == self.source_id else self.source_id

    def label(self) -> str:
        if self.type == "custom" and self.custom_type:
            return self.custom_type
        return RELATIONSHIP_TYPES.get(self.type, self.type)

    def edge(self) -> dict[str, Any]:
        """The per-direction payload used by the adjacency view."""
        return {
            "type": self.type,
            "description": self.description,
            "custom_type": self.custom_type,
        }


def ordered_pair(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a <= b else (b, a)


def pair_key(a: str, b: str) -> str:
    low, high = ordered_pair(a, b)
    return f"{low}|{high}"
