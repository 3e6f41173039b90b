"""Tests for undirected relationship edges and the graph view."""

import pytest

from char_creator.errors import ValidationError
from char_creator.storage.core import RELATIONSHIPS_KEY
from char_creator.storage.relationships import DEFAULT_AVATAR


def _pair(library):
    a = library.characters.create({"name": "Aria"})
    b = library.characters.create({"name": "Bea"})
    return a, b


def test_set_is_mirrored(library):
    a, b = _pair(library)
    library.relationships.set(a.id, b.id, "friend", "Met at sea")

    view = library.relationships.adjacency()
    assert view[a.id][b.id] == view[b.id][a.id]
    assert view[a.id][b.id]["type"] == "friend"
    assert view[b.id][a.id]["description"] == "Met at sea"


def test_get_any_order(library):
    a, b = _pair(library)
    library.relationships.set(b.id, a.id, "ally")
    assert library.relationships.get(a.id, b.id).type == "ally"
    assert library.relationships.get(b.id, a.id).type == "ally"


def test_set_overwrites_pair(library):
    a, b = _pair(library)
    library.relationships.set(a.id, b.id, "friend")
    library.relationships.set(b.id, a.id, "enemy")
    assert len(library.relationships.list()) == 1
    assert library.relationships.get(a.id, b.id).type == "enemy"


def test_set_rejects_self_link(library):
    a, _ = _pair(library)
    with pytest.raises(ValidationError):
        library.relationships.set(a.id, a.id, "friend")


def test_set_rejects_unknown_type(library):
    a, b = _pair(library)
    with pytest.raises(ValidationError):
        library.relationships.set(a.id, b.id, "frenemy")


def test_custom_type_required(library):
    a, b = _pair(library)
    with pytest.raises(ValidationError):
        library.relationships.set(a.id, b.id, "custom")
    edge = library.relationships.set(a.id, b.id, "custom", custom_type="Rival")
    assert edge.label() == "Rival"


def test_non_custom_drops_custom_type(library):
    a, b = _pair(library)
    edge = library.relationships.set(a.id, b.id, "mentor", custom_type="ignored")
    assert edge.custom_type is None
    assert edge.label() == "Mentor"


def test_remove_drops_both_directions(library):
    """Removing the only edge removes both nodes from the adjacency view."""
    a, b = _pair(library)
    library.relationships.set(a.id, b.id, "friend")
    assert library.relationships.remove(b.id, a.id) is True
    view = library.relationships.adjacency()
    assert a.id not in view
    assert b.id not in view
    assert library.relationships.remove(a.id, b.id) is False


def test_remove_all_for_character(library):
    a, b = _pair(library)
    c = library.characters.create({"name": "Cal"})
    library.relationships.set(a.id, b.id, "friend")
    library.relationships.set(a.id, c.id, "family")
    library.relationships.set(b.id, c.id, "enemy")

    assert library.relationships.remove_all_for_character(a.id) == 2
    assert list(library.relationships.for_character(b.id)) == [c.id]


def test_clear(library):
    a, b = _pair(library)
    library.relationships.set(a.id, b.id, "friend")
    library.relationships.clear()
    assert library.relationships.adjacency() == {}


# ── Graph ───────────────────────────────────────────────


def test_graph_nodes_and_links(library):
    a, b = _pair(library)
    library.relationships.set(a.id, b.id, "lover", "Since spring")
    graph = library.relationship_graph()

    assert {n["id"] for n in graph["nodes"]} == {a.id, b.id}
    assert all(n["image_url"] == DEFAULT_AVATAR for n in graph["nodes"])
    (link,) = graph["links"]
    assert {link["source"], link["target"]} == {a.id, b.id}
    assert link["label"] == "Lover"
    assert link["description"] == "Since spring"


def test_graph_skips_dangling_edges(library):
    """Deleting a character leaves its edges stored but hidden from the graph."""
    a, b = _pair(library)
    library.relationships.set(a.id, b.id, "friend")
    library.delete_character(b.id)

    graph = library.relationship_graph()
    assert [n["id"] for n in graph["nodes"]] == [a.id]
    assert graph["links"] == []
    assert len(library.relationships.list()) == 1


def test_repair_drops_malformed_edges(library):
    a, b = _pair(library)
    library.relationships.set(a.id, b.id, "friend")
    stored = library.backend.read(RELATIONSHIPS_KEY)
    stored["junk"] = {"type": "friend"}
    stored["self"] = {"source_id": a.id, "target_id": a.id, "type": "friend"}
    library.backend.write(RELATIONSHIPS_KEY, stored)

    assert library.relationships.repair() == 2
    assert len(library.backend.read(RELATIONSHIPS_KEY)) == 1
