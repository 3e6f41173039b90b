"""Folder CRUD, membership and ordering endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from char_creator.storage import CharacterLibrary

from .deps import get_library
from .models import CreateFolder, FolderMember, MoveCharacter, RenameFolder, Reorder

router = APIRouter()


@router.get("/folders")
async def list_folders(
    include_empty: bool = False, library: CharacterLibrary = Depends(get_library)
):
    """List folders. Empty folders are hidden unless include_empty is set."""
    return library.folders.list(include_empty=include_empty)


@router.post("/folders", status_code=201)
async def create_folder(body: CreateFolder, library: CharacterLibrary = Depends(get_library)):
    return library.folders.create(body.name)


@router.put("/folders/order")
async def reorder_folders(body: Reorder, library: CharacterLibrary = Depends(get_library)):
    """Replace the folder order. ids must list every folder exactly once."""
    library.folders.reorder_folders(body.ids)
    return library.folders.list(include_empty=True)


@router.post("/folders/move")
async def move_character(body: MoveCharacter, library: CharacterLibrary = Depends(get_library)):
    """Move a character between folders, or to a new index within one."""
    moved = library.folders.move_character(
        body.character_id, body.from_folder_id, body.to_folder_id, body.index
    )
    if not moved:
        raise HTTPException(404, "Folder or character not found")
    return {"ok": True}


@router.post("/folders/resync")
async def resync_folders(library: CharacterLibrary = Depends(get_library)):
    """Refresh folder entry names and images from the characters."""
    return {"updated": library.resync_folders()}


@router.get("/folders/{folder_id}")
async def get_folder(folder_id: str, library: CharacterLibrary = Depends(get_library)):
    folder = library.folders.get(folder_id)
    if folder is None:
        raise HTTPException(404, "Folder not found")
    return folder


@router.patch("/folders/{folder_id}")
async def rename_folder(
    folder_id: str, body: RenameFolder, library: CharacterLibrary = Depends(get_library)
):
    if not library.folders.rename(folder_id, body.name):
        raise HTTPException(404, "Folder not found")
    return library.folders.get(folder_id)


@router.delete("/folders/{folder_id}")
async def delete_folder(folder_id: str, library: CharacterLibrary = Depends(get_library)):
    """Delete a folder. Its characters are not touched."""
    if not library.folders.delete(folder_id):
        raise HTTPException(404, "Folder not found")
    return {"ok": True}


@router.post("/folders/{folder_id}/characters")
async def add_to_folder(
    folder_id: str, body: FolderMember, library: CharacterLibrary = Depends(get_library)
):
    """Add a character (idempotent)."""
    character = library.require(body.character_id)
    if not library.folders.add_character(folder_id, character):
        raise HTTPException(404, "Folder not found")
    return library.folders.get(folder_id)


@router.delete("/folders/{folder_id}/characters/{character_id}")
async def remove_from_folder(
    folder_id: str, character_id: str, library: CharacterLibrary = Depends(get_library)
):
    if not library.folders.remove_character(folder_id, character_id):
        raise HTTPException(404, "Folder or character not found")
    return {"ok": True}


@router.put("/folders/{folder_id}/characters/order")
async def reorder_folder(
    folder_id: str, body: Reorder, library: CharacterLibrary = Depends(get_library)
):
    if not library.folders.reorder(folder_id, body.ids):
        raise HTTPException(404, "Folder not found")
    return library.folders.get(folder_id)


@router.get("/characters/{character_id}/folders")
async def folders_for_character(
    character_id: str, library: CharacterLibrary = Depends(get_library)
):
    return library.folders.folders_for_character(character_id)
