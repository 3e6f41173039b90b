"""Export formats for characters.

  to_plain_text    "Label: value" lines, empty values kept
  to_bracketed     {Character("...")\nGender("...")...} key-call format used
                   by the Character.AI definition import; fixed field order
  to_character_ai  minimal JSON projection for a Character.AI bundle
  export_zip       backup archive, one JSON document (and image) per character

The text formats are Handlebars templates rendered with pybars; values are
substituted with triple-stash so nothing is HTML-escaped.

parse_bracketed() and character_from_template() read the key-call format
back. Fields outside the bracketed schema (interests, scenario, greeting,
description when an appearance is set) do not survive the round trip.
"""

from __future__ import annotations

import base64
import binascii
import io
import json
import logging
import re
import zipfile
from collections.abc import Callable, Iterable
from typing import Any

import pybars

from char_creator.errors import ValidationError
from char_creator.models import Character
from char_creator.storage.core import slugify

logger = logging.getLogger(__name__)

_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}

# (bracketed key, character field) in output order
BRACKETED_FIELDS: list[tuple[str, str]] = [
    ("Character", "name"),
    ("Gender", "gender"),
    ("Age", "age"),
    ("Heights", "height"),
    ("Language", "language"),
    ("Status", "status"),
    ("Occupation", "occupation"),
    ("Personality", "personality"),
    ("Skill", "skills"),
    ("Appearance", "appearance"),
    ("Figure", "figure"),
    ("Attributes", "attributes"),
    ("Speciest", "species"),
    ("Habit", "habits"),
    ("Likes", "likes"),
    ("Dislike", "dislikes"),
    ("Backstory/Roleplay", "background"),
]

# Template files on disk spell some keys differently.
_TEMPLATE_ALIASES = {"Backstory": "background"}

HEIGHT_UNIT = " cm"

PLAIN_TEXT_TEMPLATE = """\
Character: {{{name}}}
Gender: {{{gender}}}
Age: {{{age}}}
Height: {{{height}}}
Language: {{{language}}}
Status: {{{status}}}
Occupation: {{{occupation}}}
Personality: {{{personality}}}
Skills: {{{skills}}}
Appearance: {{{appearance}}}
Figure: {{{figure}}}
Attributes: {{{attributes}}}
Species: {{{species}}}
Habits: {{{habits}}}
Likes: {{{likes}}}
Dislikes: {{{dislikes}}}
Background: {{{background}}}
Interests: {{{interests}}}
Scenario: {{{scenario}}}
Greeting: {{{greeting}}}"""

BRACKETED_TEMPLATE = """\
{Character("{{{name}}}")
Gender("{{{gender}}}")
Age("{{{age}}}")
Heights("{{{height}}} cm")
Language("{{{language}}}")
Status("{{{status}}}")
Occupation("{{{occupation}}}")
Personality("{{{personality}}}")
Skill("{{{skills}}}")
Appearance("{{{appearance}}}")
Figure("{{{figure}}}")
Attributes("{{{attributes}}}")
Speciest("{{{species}}}")
Habit("{{{habits}}}")
Likes("{{{likes}}}")
Dislike("{{{dislikes}}}")
Backstory/Roleplay("{{{background}}}")}"""

_IMAGE_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


class FormatError(Exception):
    """Raised when an export template fails to compile or render."""


def render(template_str: str, context: dict[str, Any]) -> str:
    """Compile (cached by source) and render a Handlebars template."""
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context))
    except Exception as e:
        raise FormatError(f"Template error: {e}") from e


def _context(character: Character) -> dict[str, str]:
    ctx = character.text_fields()
    ctx["appearance"] = character.appearance or character.description
    return ctx


def to_plain_text(character: Character) -> str:
    return render(PLAIN_TEXT_TEMPLATE, _context(character))


def to_bracketed(character: Character) -> str:
    return render(BRACKETED_TEMPLATE, _context(character))


def to_character_ai(character: Character) -> dict[str, str]:
    return {
        "name": character.name,
        "description": character.description,
        "personality": character.personality,
        "scenario": character.scenario,
        "first_message": character.greeting,
        "avatar_uri": character.image_url or "",
    }


# ── Reading the bracketed format back ─────────────────────


def parse_bracketed(text: str) -> dict[str, str]:
    """Split a key-call document into {key: value}, keys as written.

    Values may span lines and contain quotes; a value ends where `")`
    is followed by the next key's opener.
    """
    body = text.strip()
    if body.startswith("{"):
        body = body[1:]
    if body.endswith("}"):
        body = body[:-1]

    keys = [key for key, _ in BRACKETED_FIELDS]
    result: dict[str, str] = {}
    pos = 0
    for i, key in enumerate(keys):
        opener = f'{key}("'
        start = body.find(opener, pos)
        if start == -1:
            raise ValidationError(f"Missing {key}(...) in bracketed text")
        value_start = start + len(opener)
        if i + 1 < len(keys):
            closer = re.compile(r'"\)\s*' + re.escape(keys[i + 1]) + r'\("')
            match = closer.search(body, value_start)
            if match is None:
                raise ValidationError(f"Unterminated {key}(...) in bracketed text")
            value_end, pos = match.start(), match.start()
        else:
            value_end = body.rfind('")')
            if value_end < value_start:
                raise ValidationError(f"Unterminated {key}(...) in bracketed text")
        result[key] = body[value_start:value_end]
    return result


def character_from_template(template: dict[str, Any]) -> dict[str, Any]:
    """Map a template (file or parsed bracketed text) to character fields."""
    lookup = dict(BRACKETED_FIELDS)
    lookup.update(_TEMPLATE_ALIASES)
    data: dict[str, Any] = {}
    for key, value in template.items():
        field = lookup.get(key)
        if field is None or value is None:
            continue
        value = str(value)
        if field == "height" and value.endswith(HEIGHT_UNIT):
            value = value[: -len(HEIGHT_UNIT)]
        data[field] = value
    if template.get("image_url"):
        data["image_url"] = template["image_url"]
    return data


# ── Files ────────────────────────────────────────────────

_FILENAME_SUFFIXES = {
    "text": "_character.txt",
    "bracketed": "_format.txt",
    "character-ai": "_character_ai.json",
    "json": ".json",
}


def export_filename(character: Character, kind: str) -> str:
    suffix = _FILENAME_SUFFIXES.get(kind)
    if suffix is None:
        raise ValidationError(f"Unknown export kind '{kind}'")
    return f"{slugify(character.name)}{suffix}"


def decode_data_uri(uri: str) -> tuple[bytes, str] | None:
    """Return (bytes, extension) for a base64 image data URI, else None."""
    match = _DATA_URI.match(uri)
    if match is None:
        return None
    try:
        payload = base64.b64decode(match["data"], validate=True)
    except (binascii.Error, ValueError):
        return None
    return payload, _IMAGE_EXTENSIONS.get(match["mime"].lower(), ".bin")


def export_zip(characters: Iterable[Character]) -> bytes:
    """Build a backup archive: <slug>-<id8>.json per character, plus the
    decoded image beside it when the image is an embedded data URI."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for character in characters:
            base = f"{slugify(character.name)}-{character.id[:8]}"
            record = character.model_dump()
            if character.image_url:
                decoded = decode_data_uri(character.image_url)
                if decoded is not None:
                    payload, extension = decoded
                    archive.writestr(f"{base}{extension}", payload)
                    record["image_url"] = f"{base}{extension}"
                elif character.image_url.startswith("data:"):
                    logger.warning(f"Skipping undecodable image for {character.id}")
            archive.writestr(f"{base}.json", json.dumps(record, indent=2))
    return buffer.getvalue()
