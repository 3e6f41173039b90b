"""Pydantic request models for API endpoints."""

from pydantic import BaseModel, ConfigDict

from char_creator.models import RatingValue


class CharacterBody(BaseModel):
    """Character fields for create/update. Unknown keys are ignored."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str | None = None
    gender: str | None = None
    age: str | None = None
    description: str | None = None
    personality: str | None = None
    scenario: str | None = None
    greeting: str | None = None
    interests: str | None = None
    background: str | None = None
    height: str | None = None
    language: str | None = None
    status: str | None = None
    occupation: str | None = None
    skills: str | None = None
    appearance: str | None = None
    figure: str | None = None
    attributes: str | None = None
    species: str | None = None
    habits: str | None = None
    likes: str | None = None
    dislikes: str | None = None
    image_url: str | None = None


class ImportBody(BaseModel):
    text: str


class ImageBody(BaseModel):
    image_url: str | None = None


class RateBody(BaseModel):
    character_id: str
    rating: RatingValue


class ShareBody(BaseModel):
    character_id: str


class CreateFolder(BaseModel):
    name: str


class RenameFolder(BaseModel):
    name: str


class FolderMember(BaseModel):
    character_id: str


class MoveCharacter(BaseModel):
    character_id: str
    from_folder_id: str
    to_folder_id: str
    index: int | None = None


class Reorder(BaseModel):
    ids: list[str]


class SetRelationship(BaseModel):
    source_id: str
    target_id: str
    type: str
    description: str = ""
    custom_type: str | None = None


class UpdateSettings(BaseModel):
    dark_mode: bool | None = None
    disclaimer_acknowledged: bool | None = None
    error_display_seconds: int | None = None
