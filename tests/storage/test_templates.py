"""Tests for character template discovery."""

from char_creator.storage import get_template, list_templates


def test_missing_dir(tmp_path):
    assert list_templates(tmp_path / "nope") == []


def test_pairs_json_with_image(tmp_path):
    (tmp_path / "knight.json").write_text('{"Character": "Sir Aldous"}')
    (tmp_path / "knight.png").write_bytes(b"\x89PNG")
    (tmp_path / "witch.json").write_text('{"Character": "Morwen"}')
    (tmp_path / "witch.jpg").write_bytes(b"\xff\xd8")
    (tmp_path / "ghost.json").write_text('{"Character": "Nobody"}')

    by_id = {t["id"]: t for t in list_templates(tmp_path)}
    assert by_id["knight"]["image_url"] == "/character_templates/knight.png"
    assert by_id["witch"]["image_url"] == "/character_templates/witch.jpg"
    assert by_id["ghost"]["image_url"] is None
    assert by_id["knight"]["Character"] == "Sir Aldous"


def test_skips_bad_files(tmp_path):
    (tmp_path / "ok.json").write_text('{"Character": "Ok"}')
    (tmp_path / "broken.json").write_text("{nope")
    (tmp_path / "list.json").write_text("[1, 2]")
    assert [t["id"] for t in list_templates(tmp_path)] == ["ok"]


def test_get_template(tmp_path):
    (tmp_path / "knight.json").write_text('{"Character": "Sir Aldous"}')
    assert get_template(tmp_path, "knight")["Character"] == "Sir Aldous"
    assert get_template(tmp_path, "missing") is None


def test_bundled_presets(library):
    ids = [t["id"] for t in library.list_templates()]
    assert "lighthouse-keeper" in ids
    assert library.get_template("lighthouse-keeper")["Character"] == "Maren Holt"
