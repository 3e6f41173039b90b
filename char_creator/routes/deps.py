"""Request-scoped access to the app's CharacterLibrary."""

from fastapi import Request

from char_creator.storage import CharacterLibrary


def get_library(request: Request) -> CharacterLibrary:
    return request.app.state.library
