"""Character template endpoints (read-only presets on disk)."""

from fastapi import APIRouter, Depends, HTTPException

from char_creator import export
from char_creator.storage import CharacterLibrary

from .deps import get_library

router = APIRouter()


@router.get("/character-templates")
async def list_templates(library: CharacterLibrary = Depends(get_library)):
    """List templates with their image URLs."""
    return library.list_templates()


@router.get("/character-templates/{template_id}")
async def get_template(template_id: str, library: CharacterLibrary = Depends(get_library)):
    template = library.get_template(template_id)
    if template is None:
        raise HTTPException(404, "Template not found")
    return template


@router.post("/character-templates/{template_id}/create", status_code=201)
async def create_from_template(
    template_id: str, library: CharacterLibrary = Depends(get_library)
):
    """Create a new character prefilled from a template."""
    template = library.get_template(template_id)
    if template is None:
        raise HTTPException(404, "Template not found")
    return library.characters.create(export.character_from_template(template))
