"""Rating and public sharing endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from char_creator.storage import CharacterLibrary

from .deps import get_library
from .models import RateBody, ShareBody

router = APIRouter()


@router.post("/rate-character")
async def rate_character(body: RateBody, library: CharacterLibrary = Depends(get_library)):
    """Record one like/dislike. A second vote for the same character is rejected."""
    if library.ratings.has_rated(body.character_id):
        raise HTTPException(409, "Character already rated")
    ratings = library.rate(body.character_id, body.rating)
    return {"ratings": ratings, "status": body.rating}


@router.get("/rate-character/{character_id}")
async def rating_status(character_id: str, library: CharacterLibrary = Depends(get_library)):
    """The local vote flag for a character (null when not yet rated)."""
    return {"status": library.ratings.get_status(character_id)}


@router.post("/share-character", status_code=201)
async def share_character(body: ShareBody, library: CharacterLibrary = Depends(get_library)):
    """Publish a copy of a character under a new id."""
    clone = library.share(body.character_id)
    return {"shared_id": clone.id, "character": clone}


@router.get("/shared")
async def list_shared(library: CharacterLibrary = Depends(get_library)):
    return library.shared.list()


@router.get("/shared/{shared_id}")
async def get_shared(shared_id: str, library: CharacterLibrary = Depends(get_library)):
    clone = library.shared.get(shared_id)
    if clone is None:
        raise HTTPException(404, "Shared character not found")
    return clone
