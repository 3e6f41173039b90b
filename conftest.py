import os
from pathlib import Path

import pytest

# char_creator.app builds a default app at import time; keep it off ./data
TEST_DATA_DIR = Path("data-tests")
os.environ.setdefault("DATA_DIR", str(TEST_DATA_DIR))

from char_creator.storage import CharacterLibrary  # noqa: E402

PRESETS_DIR = Path(__file__).parent / "presets" / "character_templates"


@pytest.fixture
def library():
    """Fresh in-memory library per test, with the bundled templates."""
    return CharacterLibrary.in_memory(PRESETS_DIR)


@pytest.fixture
def file_library(tmp_path):
    """Library persisted as JSON files under a temp directory."""
    return CharacterLibrary.open(tmp_path / "data", PRESETS_DIR)


@pytest.fixture
def client(library):
    """TestClient over an app sharing the `library` fixture."""
    from fastapi.testclient import TestClient

    from char_creator.app import create_app

    app = create_app(templates_dir=PRESETS_DIR, library=library)
    return TestClient(app)
