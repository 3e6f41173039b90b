"""Collection statistics for the dashboard.

Everything here is a pure reduction over the characters (and optionally
their version histories); nothing is stored.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from char_creator.models import CHARACTER_FIELDS, Character, Version

UNSPECIFIED = "unspecified"

# (label, lower bound); each bucket runs up to the next bound, exclusive
AGE_BUCKETS = [
    ("Under 18", 0),
    ("18-25", 18),
    ("26-35", 26),
    ("36-50", 36),
    ("Over 50", 51),
]
UNKNOWN_AGE = "Unknown"

STOP_WORDS = frozenset("""
a an and are as at be but by for from has have he her his i in is it its
of on or she so that the their them they this to very was with who
""".split())

_WORD = re.compile(r"[a-z][a-z'-]+")
_NUMBER = re.compile(r"\d+(?:\.\d+)?")


def _distribution(values: Iterable[str]) -> dict[str, int]:
    counts = Counter(v.strip().lower() or UNSPECIFIED for v in values)
    return dict(counts.most_common())


def _first_number(text: str) -> float | None:
    match = _NUMBER.search(text)
    return float(match.group()) if match else None


def age_bucket(age: str) -> str:
    value = _first_number(age)
    if value is None:
        return UNKNOWN_AGE
    bucket = UNKNOWN_AGE
    for label, low in AGE_BUCKETS:
        if value >= low:
            bucket = label
    return bucket


def top_words(texts: Iterable[str], n: int = 10) -> list[dict[str, Any]]:
    """Most frequent words (3+ letters, stop words removed)."""
    counts: Counter[str] = Counter()
    for text in texts:
        for word in _WORD.findall(text.lower()):
            word = word.strip("'-")
            if len(word) >= 3 and word not in STOP_WORDS:
                counts[word] += 1
    return [{"word": w, "count": c} for w, c in counts.most_common(n)]


def completeness(character: Character) -> int:
    """Percentage of descriptive fields that are filled in."""
    filled = sum(1 for v in character.text_fields().values() if v.strip())
    return round(filled * 100 / len(CHARACTER_FIELDS))


def _list_items(text: str) -> int:
    return len([item for item in text.split(",") if item.strip()])


def _timeline(
    characters: list[Character], versions: Mapping[str, list[Version]] | None
) -> list[dict[str, Any]]:
    days: dict[str, dict[str, int]] = {}

    def bump(timestamp: str, kind: str) -> None:
        day = timestamp[:10]
        if day:
            days.setdefault(day, {"creations": 0, "edits": 0})[kind] += 1

    for char in characters:
        bump(char.created_at, "creations")
        if versions is None and char.updated_at != char.created_at:
            bump(char.updated_at, "edits")
    if versions is not None:
        for history in versions.values():
            for version in history:
                bump(version.timestamp, "edits")
    return [{"date": day, **counts} for day, counts in sorted(days.items())]


def compute_statistics(
    characters: Iterable[Character],
    versions: Mapping[str, list[Version]] | None = None,
    top_n: int = 10,
) -> dict[str, Any]:
    """Aggregate distributions, word frequencies, completeness and activity.

    When `versions` is given, each recorded version counts as one edit on
    its date; otherwise a character whose updated_at differs from its
    created_at counts as one edit on its last update date.
    """
    chars = list(characters)

    heights = [h for h in (_first_number(c.height) for c in chars) if h is not None]
    per_character = {c.id: completeness(c) for c in chars}
    background_words = [len(c.background.split()) for c in chars]
    ages = Counter(age_bucket(c.age) for c in chars)

    return {
        "total_characters": len(chars),
        "gender_distribution": _distribution(c.gender for c in chars),
        "species_distribution": _distribution(c.species for c in chars),
        "language_distribution": _distribution(c.language for c in chars),
        "occupation_distribution": _distribution(c.occupation for c in chars),
        "age_distribution": {
            label: ages[label]
            for label in [b[0] for b in AGE_BUCKETS] + [UNKNOWN_AGE]
            if ages[label]
        },
        "height_statistics": {
            "average": round(sum(heights) / len(heights)) if heights else 0,
            "min": min(heights) if heights else 0,
            "max": max(heights) if heights else 0,
        },
        "most_common_personality_words": top_words((c.personality for c in chars), top_n),
        "most_common_skills": top_words((c.skills for c in chars), top_n),
        "most_common_traits": top_words(
            (f"{c.likes} {c.dislikes}" for c in chars), top_n
        ),
        "completeness": {
            "average": round(sum(per_character.values()) / len(chars)) if chars else 0,
            "per_character": per_character,
        },
        "creation_timeline": _timeline(chars, versions),
        "image_stats": {
            "with_image": sum(1 for c in chars if c.image_url),
            "without_image": sum(1 for c in chars if not c.image_url),
        },
        "background_word_counts": background_words,
        "preferences_stats": {
            "likes": sum(_list_items(c.likes) for c in chars),
            "dislikes": sum(_list_items(c.dislikes) for c in chars),
        },
    }
