"""Local JSON storage for characters and everything hanging off them.

Data layout (one document per key, `<key>.json` under the data dir):
  characters.json          list of Character
  versions.json            {character_id: [Version, ...]}  append-only
  shared-characters.json   list of SharedCharacter (public clones)
  folders.json             list of Folder with denormalized entries
  relationships.json       {"<low_id>|<high_id>": Relationship}
  rating-status.json       {character_id: "like" | "dislike"}
  config.json              UI settings

Stores do whole-document read-modify-write passes; there is no locking and
the last writer wins.

Identity: ids are uuid4 hex strings, unique across the primary and shared
collections. Character.create rejects a (name case-insensitive, gender, age)
triple that already exists; updates do not re-check it.
"""

# Re-export public symbols so `from char_creator import storage` is enough.

from .core import (  # noqa: F401
    JsonFileBackend,
    MemoryBackend,
    StorageBackend,
    slugify,
)

from .characters import CharacterStore  # noqa: F401
from .versions import VersionStore  # noqa: F401
from .shared import SharedStore  # noqa: F401
from .folders import FolderStore, is_valid_folder  # noqa: F401
from .relationships import RelationshipStore  # noqa: F401
from .ratings import RatingStore  # noqa: F401

from .templates import (  # noqa: F401
    get_template,
    list_templates,
)

from .config import (  # noqa: F401
    get_config,
    update_config,
)

from .library import CharacterLibrary  # noqa: F401
