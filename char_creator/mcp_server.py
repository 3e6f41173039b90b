"""FastMCP server exposing the character library as read-only MCP tools.

Tools:
  - list_characters()                 summaries of every primary character
  - get_character(character_id)       full record (primary or shared)
  - export_character(character_id, kind)   text / bracketed / character-ai

The library is replaced via set_library() for tests, or opened on DATA_DIR
when run as __main__.

Usage:
    python -m char_creator.mcp_server
"""

from mcp.server.fastmcp import FastMCP

from char_creator import export
from char_creator.storage import CharacterLibrary

mcp = FastMCP("char-creator")

_library: CharacterLibrary = CharacterLibrary.in_memory()


def set_library(library: CharacterLibrary) -> None:
    """Replace the active library (used in tests)."""
    global _library
    _library = library


def get_library() -> CharacterLibrary:
    return _library


@mcp.tool()
def list_characters() -> dict:
    """List characters as {id, name, gender, age, occupation} summaries."""
    return {
        "characters": [
            {
                "id": c.id,
                "name": c.name,
                "gender": c.gender,
                "age": c.age,
                "occupation": c.occupation,
            }
            for c in _library.characters.list()
        ]
    }


@mcp.tool()
def get_character(character_id: str) -> dict:
    """Return one character's full record. Raises if the id is unknown."""
    return _library.require(character_id).model_dump()


@mcp.tool()
def export_character(character_id: str, kind: str = "bracketed") -> dict:
    """Export a character as 'text', 'bracketed' or 'character-ai'."""
    character = _library.require(character_id)
    if kind == "character-ai":
        return {"kind": kind, "content": export.to_character_ai(character)}
    if kind == "text":
        return {"kind": kind, "content": export.to_plain_text(character)}
    if kind == "bracketed":
        return {"kind": kind, "content": export.to_bracketed(character)}
    raise ValueError(f"Unknown export kind '{kind}'")


if __name__ == "__main__":
    import os
    from pathlib import Path

    from dotenv import load_dotenv

    load_dotenv(Path(__file__).parent.parent / ".env")
    data_dir = Path(os.getenv("DATA_DIR", str(Path(__file__).parent.parent / "data")))
    set_library(CharacterLibrary.open(data_dir))
    mcp.run()
