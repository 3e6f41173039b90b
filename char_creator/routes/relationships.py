"""Relationship endpoints. Edges are undirected; pair order does not matter."""

from fastapi import APIRouter, Depends, HTTPException

from char_creator.models import RELATIONSHIP_TYPES
from char_creator.storage import CharacterLibrary

from .deps import get_library
from .models import SetRelationship

router = APIRouter()


@router.get("/relationships")
async def list_relationships(library: CharacterLibrary = Depends(get_library)):
    """Mirrored adjacency map: {id: {other_id: edge}}."""
    return library.relationships.adjacency()


@router.get("/relationships/types")
async def relationship_types():
    return [{"id": k, "label": v} for k, v in RELATIONSHIP_TYPES.items()]


@router.get("/relationships/graph")
async def relationship_graph(library: CharacterLibrary = Depends(get_library)):
    """Nodes and links for the graph view. Edges to missing characters are skipped."""
    return library.relationship_graph()


@router.put("/relationships")
async def set_relationship(
    body: SetRelationship, library: CharacterLibrary = Depends(get_library)
):
    """Create or overwrite the edge between two characters."""
    return library.relationships.set(
        body.source_id,
        body.target_id,
        body.type,
        description=body.description,
        custom_type=body.custom_type,
    )


@router.get("/relationships/{character_id}")
async def relationships_for(character_id: str, library: CharacterLibrary = Depends(get_library)):
    return library.relationships.for_character(character_id)


@router.delete("/relationships/{source_id}/{target_id}")
async def remove_relationship(
    source_id: str, target_id: str, library: CharacterLibrary = Depends(get_library)
):
    if not library.relationships.remove(source_id, target_id):
        raise HTTPException(404, "Relationship not found")
    return {"ok": True}
