import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from char_creator.errors import (
    CharacterStoreError,
    DuplicateError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from char_creator.routes import router
from char_creator.storage import CharacterLibrary

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_TEMPLATES_DIR = Path(__file__).parent.parent / "presets" / "character_templates"

_STATUS_CODES: list[tuple[type[CharacterStoreError], int]] = [
    (NotFoundError, 404),
    (DuplicateError, 409),
    (ValidationError, 422),
    (StorageError, 500),
]


async def store_error_handler(request: Request, exc: CharacterStoreError) -> JSONResponse:
    status = next((code for cls, code in _STATUS_CODES if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.debug(f"{request.method} {request.url.path} -> {status}: {exc}")
    return JSONResponse(status_code=status, content={"detail": str(exc)})


def create_app(
    data_dir: Path | None = None,
    templates_dir: Path | None = None,
    library: CharacterLibrary | None = None,
) -> FastAPI:
    """Build the API app around one CharacterLibrary.

    Pass `library` to reuse an existing one (tests use an in-memory
    library); otherwise it is opened on DATA_DIR and repaired once.
    """
    resolved_templates = templates_dir or Path(
        os.getenv("TEMPLATES_DIR", str(DEFAULT_TEMPLATES_DIR))
    )
    if library is None:
        resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))
        library = CharacterLibrary.open(resolved, resolved_templates)
        library.repair()

    app = FastAPI(title="Character Creator")
    app.state.library = library
    app.add_exception_handler(CharacterStoreError, store_error_handler)
    app.include_router(router, prefix="/api")

    if resolved_templates.exists():
        app.mount(
            "/character_templates",
            StaticFiles(directory=resolved_templates),
            name="character_templates",
        )

    return app


# Default app instance for uvicorn (uses DATA_DIR env var or default)
app = create_app()
