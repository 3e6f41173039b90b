"""FastAPI API endpoints under /api.

Endpoint groups: settings (health, settings, repair), character-templates,
characters (CRUD, versions, export, import, statistics), sharing (ratings,
shared clones), folders, relationships. Store errors propagate to the
app-level handler in char_creator.app, which maps them to status codes.
"""

from fastapi import APIRouter

from .characters import router as characters_router
from .folders import router as folders_router
from .relationships import router as relationships_router
from .settings import router as settings_router
from .sharing import router as sharing_router
from .templates import router as templates_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(templates_router)
router.include_router(characters_router)
router.include_router(sharing_router)
router.include_router(folders_router)
router.include_router(relationships_router)
