"""Tests for version history and restore."""

import pytest

from char_creator.errors import NotFoundError, StorageError
from char_creator.storage.core import VERSIONS_KEY


def test_versions_empty(library):
    assert library.versions.list("nobody") == []


def test_versions_in_insertion_order(library):
    char = library.characters.create({"name": "Aria", "age": "24"})
    library.characters.update(char.id, {"age": "25"})
    library.characters.update(char.id, {"age": "26"})
    ages = [v.data["age"] for v in library.versions.list(char.id)]
    assert ages == ["24", "25"]


def test_get_version(library):
    char = library.characters.create({"name": "Aria"})
    library.characters.update(char.id, {"likes": "tea"})
    version = library.versions.list(char.id)[0]
    assert library.versions.get(char.id, version.id) == version
    assert library.versions.get(char.id, "missing") is None


def test_restore_grows_history(library):
    """Restoring applies the snapshot as an update, so history grows by one."""
    char = library.characters.create({"name": "Aria", "age": "24"})
    library.characters.update(char.id, {"age": "25"})
    library.characters.update(char.id, {"age": "26"})
    first = library.versions.list(char.id)[0]

    restored = library.restore_version(char.id, first.id)

    assert restored.age == "24"
    assert restored.id == char.id
    assert restored.created_at == char.created_at
    versions = library.versions.list(char.id)
    assert len(versions) == 3
    assert versions[-1].data["age"] == "26"
    assert versions[-1].changes == ["age"]


def test_restore_keeps_rating_counters(library):
    char = library.characters.create({"name": "Aria", "age": "24"})
    library.characters.update(char.id, {"age": "25"})
    library.rate(char.id, "like")
    version = library.versions.list(char.id)[0]

    restored = library.restore_version(char.id, version.id)
    assert restored.ratings.likes == 1


def test_restore_unknown_version(library):
    char = library.characters.create({"name": "Aria"})
    with pytest.raises(NotFoundError):
        library.restore_version(char.id, "nope")


def test_corrupt_version_skipped(library):
    char = library.characters.create({"name": "Aria"})
    library.characters.update(char.id, {"age": "1"})
    history = library.backend.read(VERSIONS_KEY)
    history[char.id].append({"changes": "not a list"})
    library.backend.write(VERSIONS_KEY, history)
    assert len(library.versions.list(char.id)) == 1


def test_all_histories(library):
    a = library.characters.create({"name": "A"})
    b = library.characters.create({"name": "B"})
    library.characters.update(a.id, {"age": "1"})
    library.characters.update(b.id, {"age": "2"})
    assert set(library.versions.all()) == {a.id, b.id}


# ── Malformed histories ─────────────────────────────────


def test_non_list_history_reads_empty(library):
    char = library.characters.create({"name": "Aria"})
    library.backend.write(VERSIONS_KEY, {char.id: 5})
    assert library.versions.list(char.id) == []
    assert library.versions.get(char.id, "any") is None
    assert library.versions.all() == {char.id: []}


def test_update_over_malformed_history_raises_storage_error(library):
    """The existing history is never overwritten by a fresh snapshot."""
    char = library.characters.create({"name": "Aria", "age": "24"})
    library.backend.write(VERSIONS_KEY, {char.id: {"bad": 1}})

    with pytest.raises(StorageError):
        library.characters.update(char.id, {"age": "25"})
    assert library.characters.get(char.id).age == "24"
    assert library.backend.read(VERSIONS_KEY) == {char.id: {"bad": 1}}


def test_repair_resets_malformed_history(library):
    char = library.characters.create({"name": "Aria", "age": "24"})
    other = library.characters.create({"name": "Bea"})
    library.characters.update(other.id, {"age": "30"})
    history = library.backend.read(VERSIONS_KEY)
    history[char.id] = {"bad": 1}
    history[other.id].append("junk")
    library.backend.write(VERSIONS_KEY, history)

    assert library.repair()["versions"] == 2
    assert library.versions.list(char.id) == []
    assert len(library.versions.list(other.id)) == 1
    library.characters.update(char.id, {"age": "25"})
    assert library.versions.list(char.id)[0].changes == ["age"]
