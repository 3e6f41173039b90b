"""Exceptions raised by the character stores.

Stores return None / False / [] for lookups that simply miss and raise one
of these for invariant violations. Routes translate them to HTTP statuses.
"""


class CharacterStoreError(Exception):
    """Base class for all store errors."""


class NotFoundError(CharacterStoreError):
    """The target id of an operation does not resolve."""


class DuplicateError(CharacterStoreError):
    """A create collides with an existing (name, gender, age) triple."""


class StorageError(CharacterStoreError):
    """Reading or writing the underlying JSON documents failed."""


class ValidationError(CharacterStoreError):
    """A payload is structurally invalid."""
