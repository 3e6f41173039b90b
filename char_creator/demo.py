"""Create demo characters, folders and relationships for development."""

from char_creator.storage import CharacterLibrary
from char_creator.storage.core import (
    CHARACTERS_KEY,
    FOLDERS_KEY,
    RATING_STATUS_KEY,
    RELATIONSHIPS_KEY,
    SHARED_KEY,
    VERSIONS_KEY,
)

DEMO_CHARACTERS = [
    {
        "name": "Aria Vale",
        "gender": "Female",
        "age": "25",
        "height": "168",
        "language": "English",
        "status": "Single",
        "occupation": "Cartographer",
        "species": "Human",
        "personality": "Curious, stubborn, warm once you earn her trust",
        "skills": "Map making, climbing, reading old scripts",
        "appearance": "Windburned cheeks, ink-stained fingers, a braid of copper hair",
        "figure": "Lean",
        "attributes": "Sharp eyes",
        "habits": "Hums while she draws",
        "likes": "Rainy mornings, strong tea",
        "dislikes": "Crowds, unfinished maps",
        "background": "Raised in a lighthouse, Aria charts coastlines no one else dares to sail.",
        "scenario": "You meet Aria at a harbor tavern, spreading a torn map across the table.",
        "greeting": "You look like someone who can read a compass. Sit down.",
    },
    {
        "name": "Brother Osric",
        "gender": "Male",
        "age": "61",
        "height": "181",
        "language": "English, Latin",
        "occupation": "Monk",
        "species": "Human",
        "personality": "Patient, dry humor, quietly protective",
        "skills": "Herbalism, calligraphy",
        "likes": "Silence, bees",
        "dislikes": "Haste",
        "background": "Osric keeps the archive of a mountain abbey.",
    },
    {
        "name": "Pip",
        "gender": "Male",
        "age": "3",
        "species": "Fox",
        "personality": "Mischievous, loyal",
        "habits": "Steals buttons",
        "likes": "Buttons, cheese",
    },
]


def create_demo_data(library: CharacterLibrary) -> None:
    """Wipe every collection and create fresh demo data."""
    for key in (
        CHARACTERS_KEY,
        VERSIONS_KEY,
        SHARED_KEY,
        FOLDERS_KEY,
        RELATIONSHIPS_KEY,
        RATING_STATUS_KEY,
    ):
        library.backend.delete(key)

    aria, osric, pip = (library.characters.create(data) for data in DEMO_CHARACTERS)

    # One edit so the version history is not empty out of the box
    library.characters.update(aria.id, {"status": "Engaged"})

    party = library.folders.create("Adventuring Party")
    for char in (aria, osric, pip):
        library.folders.add_character(party.id, char)

    library.relationships.set(aria.id, osric.id, "mentor", "Osric taught her to read old scripts")
    library.relationships.set(aria.id, pip.id, "pet")
    library.relationships.set(
        osric.id, pip.id, "custom", "Pip raids the abbey kitchen", custom_type="nemesis"
    )
