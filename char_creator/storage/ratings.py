"""Like/dislike counters and the local "already voted" flags.

Counters live on the character record. The vote flag is one string per
character id; the store records it but does not enforce it, callers decide
whether a second vote is allowed.
"""

from __future__ import annotations

import logging

from char_creator.errors import NotFoundError, ValidationError
from char_creator.models import Ratings, SharedCharacter

from .characters import CharacterStore
from .core import RATING_STATUS_KEY, StorageBackend, read_dict

logger = logging.getLogger(__name__)

_COUNTERS = {"like": "likes", "dislike": "dislikes"}


class RatingStore:
    def __init__(self, backend: StorageBackend, characters: CharacterStore) -> None:
        self._backend = backend
        self._characters = characters

    def get_status(self, character_id: str) -> str | None:
        return read_dict(self._backend, RATING_STATUS_KEY).get(character_id)

    def has_rated(self, character_id: str) -> bool:
        return self.get_status(character_id) is not None

    def set_status(self, character_id: str, rating: str) -> None:
        statuses = read_dict(self._backend, RATING_STATUS_KEY)
        statuses[character_id] = rating
        self._backend.write(RATING_STATUS_KEY, statuses)

    def clear_status(self, character_id: str) -> bool:
        statuses = read_dict(self._backend, RATING_STATUS_KEY)
        if statuses.pop(character_id, None) is None:
            return False
        self._backend.write(RATING_STATUS_KEY, statuses)
        return True

    def rate(self, character_id: str, rating: str) -> Ratings:
        """Increment the like or dislike counter and set the vote flag.

        Works for primary and shared characters. The counter change is not
        recorded as a version.
        """
        counter = _COUNTERS.get(rating)
        if counter is None:
            raise ValidationError(f"Rating must be 'like' or 'dislike', got {rating!r}")
        character = self._characters.get(character_id)
        if character is None:
            raise NotFoundError(f"Character {character_id} not found")

        before = character.ratings.model_copy()
        setattr(character.ratings, counter, getattr(character.ratings, counter) + 1)
        if isinstance(character, SharedCharacter):
            self._characters.shared.save(character)
        else:
            self._characters.save(character)
        self.set_status(character_id, rating)
        logger.debug(f"Rated {character_id} before={before} after={character.ratings}")
        return character.ratings
