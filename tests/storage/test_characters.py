"""Tests for the character store: create, update, versions, delete, repair."""

import pytest

from char_creator.errors import DuplicateError, NotFoundError, ValidationError
from char_creator.storage.core import CHARACTERS_KEY


# ── Create ──────────────────────────────────────────────


def test_list_empty(library):
    assert library.characters.list() == []


def test_create_assigns_id_and_timestamps(library):
    char = library.characters.create({"name": "Aria", "gender": "female", "age": "24"})
    assert len(char.id) == 32
    assert char.created_at == char.updated_at
    assert char.ratings.likes == 0
    assert library.characters.get(char.id) == char


def test_create_ignores_managed_fields(library):
    char = library.characters.create({"name": "Aria", "id": "mine", "created_at": "x"})
    assert char.id != "mine"
    assert char.created_at != "x"


def test_create_coerces_numbers(library):
    """Numeric form values are stored as strings."""
    char = library.characters.create({"name": "Aria", "age": 24, "height": 170})
    assert char.age == "24"
    assert char.height == "170"


def test_create_requires_name(library):
    with pytest.raises(ValidationError):
        library.characters.create({"name": "   ", "gender": "female"})


def test_create_duplicate_rejected(library):
    """Same name (case-insensitive), gender and age is a duplicate."""
    library.characters.create({"name": "Aria", "gender": "female", "age": "24"})
    with pytest.raises(DuplicateError):
        library.characters.create({"name": "ARIA ", "gender": "female", "age": "24"})
    assert len(library.characters.list()) == 1


def test_create_same_name_different_age_allowed(library):
    library.characters.create({"name": "Aria", "gender": "female", "age": "24"})
    library.characters.create({"name": "Aria", "gender": "female", "age": "30"})
    assert len(library.characters.list()) == 2


def test_create_same_identity_with_one_field_changed(library):
    """Changing any one of name, gender or age avoids the duplicate check."""
    library.characters.create({"name": "Aria", "gender": "female", "age": "24"})
    library.characters.create({"name": "Aria Vale", "gender": "female", "age": "24"})
    library.characters.create({"name": "Aria", "gender": "male", "age": "24"})
    assert len(library.characters.list()) == 3


def test_gender_compared_exactly(library):
    """Only the name is case-insensitive; gender differing in case is distinct."""
    library.characters.create({"name": "Aria", "gender": "female", "age": "24"})
    library.characters.create({"name": "Aria", "gender": "Female", "age": "24"})
    assert len(library.characters.list()) == 2
    with pytest.raises(DuplicateError):
        library.characters.create({"name": "aria", "gender": "Female", "age": "24"})


def test_ids_unique(library):
    ids = {library.characters.create({"name": f"C{i}"}).id for i in range(20)}
    assert len(ids) == 20


# ── Update & versions ───────────────────────────────────


def test_update_records_version(library):
    char = library.characters.create({"name": "Aria", "gender": "female", "age": "24"})
    updated = library.characters.update(char.id, {"age": "25"})

    assert updated.age == "25"
    versions = library.versions.list(char.id)
    assert len(versions) == 1
    assert versions[0].changes == ["age"]
    assert versions[0].data["age"] == "24"


def test_update_ignores_immutable_fields(library):
    char = library.characters.create({"name": "Aria"})
    updated = library.characters.update(
        char.id, {"id": "other", "created_at": "1999", "status": "Away"}
    )
    assert updated.id == char.id
    assert updated.created_at == char.created_at
    assert updated.status == "Away"


def test_update_unchanged_value_not_listed(library):
    char = library.characters.create({"name": "Aria", "age": "24"})
    library.characters.update(char.id, {"age": "24", "likes": "tea"})
    assert library.versions.list(char.id)[0].changes == ["likes"]


def test_update_unknown_id(library):
    with pytest.raises(NotFoundError):
        library.characters.update("missing", {"age": "1"})


def test_update_does_not_recheck_duplicates(library):
    library.characters.create({"name": "Aria", "gender": "female", "age": "24"})
    other = library.characters.create({"name": "Bea", "gender": "female", "age": "24"})
    updated = library.characters.update(other.id, {"name": "Aria"})
    assert updated.name == "Aria"


def test_set_image_skips_version(library):
    char = library.characters.create({"name": "Aria"})
    updated = library.characters.set_image(char.id, "data:image/png;base64,AAAA")
    assert updated.image_url.startswith("data:image/png")
    assert library.versions.list(char.id) == []


# ── Delete ──────────────────────────────────────────────


def test_delete(library):
    char = library.characters.create({"name": "Aria"})
    assert library.characters.delete(char.id) is True
    assert library.characters.get(char.id) is None
    assert library.characters.delete(char.id) is False


def test_delete_keeps_history(library):
    """Deletes do not cascade into the version store."""
    char = library.characters.create({"name": "Aria"})
    library.characters.update(char.id, {"age": "30"})
    library.characters.delete(char.id)
    assert len(library.versions.list(char.id)) == 1


# ── Corrupt data ────────────────────────────────────────


def test_list_skips_corrupt_entries_without_rewriting(library):
    good = library.characters.create({"name": "Aria"}).model_dump()
    library.backend.write(CHARACTERS_KEY, [good, "junk", {"name": ["not", "a", "string"]}])

    assert [c.name for c in library.characters.list()] == ["Aria"]
    assert len(library.backend.read(CHARACTERS_KEY)) == 3


def test_repair_drops_corrupt_and_repeated(library):
    good = library.characters.create({"name": "Aria"}).model_dump()
    library.backend.write(CHARACTERS_KEY, [good, "junk", dict(good)])

    assert library.characters.repair() == 2
    assert len(library.backend.read(CHARACTERS_KEY)) == 1


def test_persists_to_file(file_library):
    char = file_library.characters.create({"name": "Aria"})
    path = file_library.backend.data_dir / "characters.json"
    assert path.is_file()
    assert char.id in path.read_text()
