"""Read-only character templates (JSON definitions paired with images).

    character_templates/
      knight.json     {"Character": "Sir Aldous", "Gender": "Male", ...}
      knight.png      optional image with the same base name
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".png", ".jpg")
TEMPLATE_URL_PREFIX = "/character_templates"


def _image_for(templates_dir: Path, base_name: str) -> str | None:
    for suffix in IMAGE_SUFFIXES:
        if (templates_dir / f"{base_name}{suffix}").is_file():
            return f"{TEMPLATE_URL_PREFIX}/{base_name}{suffix}"
    return None


def _load(templates_dir: Path, path: Path) -> dict[str, Any] | None:
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        logger.warning(f"Skipping template {path.name}: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Skipping template {path.name}: not a JSON object")
        return None
    data["id"] = path.stem
    data["image_url"] = _image_for(templates_dir, path.stem)
    return data


def list_templates(templates_dir: Path) -> list[dict[str, Any]]:
    """All readable templates. Returns [] if the directory is missing."""
    if not templates_dir.is_dir():
        return []
    results = []
    for path in sorted(templates_dir.glob("*.json")):
        template = _load(templates_dir, path)
        if template is not None:
            results.append(template)
    return results


def get_template(templates_dir: Path, template_id: str) -> dict[str, Any] | None:
    path = templates_dir / f"{template_id}.json"
    if not path.is_file():
        return None
    return _load(templates_dir, path)
