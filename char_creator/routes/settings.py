"""Health check, settings and maintenance endpoints."""

from fastapi import APIRouter, Depends

from char_creator.storage import CharacterLibrary

from .deps import get_library
from .models import UpdateSettings

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings(library: CharacterLibrary = Depends(get_library)):
    """Get UI settings (dark mode, disclaimer, error display time)."""
    return library.get_config()


@router.patch("/settings")
async def update_settings(
    body: UpdateSettings, library: CharacterLibrary = Depends(get_library)
):
    """Update UI settings (partial merge)."""
    return library.update_config(body.model_dump(exclude_none=True))


@router.post("/repair")
async def repair(library: CharacterLibrary = Depends(get_library)):
    """Drop corrupt entries. Returns counts per collection."""
    return library.repair()
