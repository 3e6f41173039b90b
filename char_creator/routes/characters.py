"""Character CRUD, version history, export and import endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse, Response

from char_creator import export
from char_creator.storage import CharacterLibrary

from .deps import get_library
from .models import CharacterBody, ImageBody, ImportBody

router = APIRouter()


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/characters")
async def list_characters(library: CharacterLibrary = Depends(get_library)):
    """List all primary characters."""
    return library.characters.list()


@router.post("/characters", status_code=201)
async def create_character(
    body: CharacterBody, library: CharacterLibrary = Depends(get_library)
):
    """Create a character. 409 if name/gender/age already exist."""
    return library.characters.create(body.model_dump(exclude_none=True))


@router.post("/characters/import", status_code=201)
async def import_character(
    body: ImportBody, library: CharacterLibrary = Depends(get_library)
):
    """Create a character from bracketed key-call text."""
    template = export.parse_bracketed(body.text)
    return library.characters.create(export.character_from_template(template))


@router.get("/characters/export.zip")
async def export_all(library: CharacterLibrary = Depends(get_library)):
    """Download every character (and embedded images) as a ZIP backup."""
    payload = export.export_zip(library.characters.list())
    return Response(
        payload,
        media_type="application/zip",
        headers=_attachment("characters.zip"),
    )


@router.get("/characters/{character_id}")
async def get_character(
    character_id: str, library: CharacterLibrary = Depends(get_library)
):
    """Get a character by id (primary or shared)."""
    return library.require(character_id)


@router.patch("/characters/{character_id}")
async def update_character(
    character_id: str,
    body: CharacterBody,
    library: CharacterLibrary = Depends(get_library),
):
    """Merge fields over a character. The prior state becomes a version."""
    return library.characters.update(character_id, body.model_dump(exclude_none=True))


@router.put("/characters/{character_id}/image")
async def set_image(
    character_id: str,
    body: ImageBody,
    library: CharacterLibrary = Depends(get_library),
):
    """Attach (or clear) an image without recording a version."""
    return library.characters.set_image(character_id, body.image_url)


@router.delete("/characters/{character_id}")
async def delete_character(
    character_id: str, library: CharacterLibrary = Depends(get_library)
):
    """Delete a character. Folder entries and relationships are kept."""
    if not library.delete_character(character_id):
        raise HTTPException(404, "Character not found")
    return {"ok": True}


# ── Versions ──────────────────────────────────────────────


@router.get("/characters/{character_id}/versions")
async def list_versions(
    character_id: str, library: CharacterLibrary = Depends(get_library)
):
    """Version history, oldest first."""
    return library.versions.list(character_id)


@router.post("/characters/{character_id}/versions/{version_id}/restore")
async def restore_version(
    character_id: str,
    version_id: str,
    library: CharacterLibrary = Depends(get_library),
):
    """Restore a snapshot. The current state is versioned first."""
    return library.restore_version(character_id, version_id)


# ── Export ────────────────────────────────────────────────


@router.get("/characters/{character_id}/export/text")
async def export_text(
    character_id: str, library: CharacterLibrary = Depends(get_library)
):
    character = library.require(character_id)
    return PlainTextResponse(
        export.to_plain_text(character),
        headers=_attachment(export.export_filename(character, "text")),
    )


@router.get("/characters/{character_id}/export/bracketed")
async def export_bracketed(
    character_id: str, library: CharacterLibrary = Depends(get_library)
):
    character = library.require(character_id)
    return PlainTextResponse(
        export.to_bracketed(character),
        headers=_attachment(export.export_filename(character, "bracketed")),
    )


@router.get("/characters/{character_id}/export/character-ai")
async def export_character_ai(
    character_id: str, library: CharacterLibrary = Depends(get_library)
):
    return export.to_character_ai(library.require(character_id))


# ── Statistics ────────────────────────────────────────────


@router.get("/statistics")
async def statistics(top_n: int = 10, library: CharacterLibrary = Depends(get_library)):
    """Dashboard aggregates over the whole collection."""
    return library.statistics(top_n)
