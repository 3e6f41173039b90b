"""Tests for dashboard statistics."""

from char_creator.models import Character, Version
from char_creator.statistics import age_bucket, completeness, compute_statistics, top_words


def test_empty_collection():
    stats = compute_statistics([])
    assert stats["total_characters"] == 0
    assert stats["height_statistics"] == {"average": 0, "min": 0, "max": 0}
    assert stats["completeness"]["average"] == 0
    assert stats["creation_timeline"] == []


def test_age_bucket():
    assert age_bucket("12") == "Under 18"
    assert age_bucket("18") == "18-25"
    assert age_bucket("about 30 years") == "26-35"
    assert age_bucket("50") == "36-50"
    assert age_bucket("300") == "Over 50"
    assert age_bucket("ancient") == "Unknown"


def test_distributions_normalize_case():
    chars = [
        Character(name="A", gender="Female", species="Elf"),
        Character(name="B", gender="female", species=""),
        Character(name="C", gender="Male"),
    ]
    stats = compute_statistics(chars)
    assert stats["gender_distribution"] == {"female": 2, "male": 1}
    assert stats["species_distribution"] == {"unspecified": 2, "elf": 1}


def test_height_statistics():
    chars = [Character(name="A", height="160"), Character(name="B", height="181 cm"),
             Character(name="C")]
    assert compute_statistics(chars)["height_statistics"] == {
        "average": 170, "min": 160.0, "max": 181.0,
    }


def test_top_words_filters_stop_words():
    result = top_words(["The brave and the bold", "brave heart"], n=2)
    assert result[0] == {"word": "brave", "count": 2}
    assert all(r["word"] not in ("the", "and") for r in result)


def test_completeness():
    assert completeness(Character()) == 0
    full = Character(**{name: "x" for name in Character().text_fields()})
    assert completeness(full) == 100


def test_timeline_counts_versions():
    a = Character(name="A", created_at="2024-05-01T10:00:00+00:00",
                  updated_at="2024-05-01T10:00:00+00:00")
    versions = {a.id: [Version(data={}, timestamp="2024-05-02T09:00:00+00:00"),
                       Version(data={}, timestamp="2024-05-02T11:00:00+00:00")]}
    assert compute_statistics([a], versions)["creation_timeline"] == [
        {"date": "2024-05-01", "creations": 1, "edits": 0},
        {"date": "2024-05-02", "creations": 0, "edits": 2},
    ]


def test_timeline_without_versions_uses_updated_at():
    a = Character(name="A", created_at="2024-05-01T10:00:00+00:00",
                  updated_at="2024-05-03T10:00:00+00:00")
    timeline = compute_statistics([a])["creation_timeline"]
    assert timeline[-1] == {"date": "2024-05-03", "creations": 0, "edits": 1}


def test_images_and_preferences():
    chars = [
        Character(name="A", image_url="/a.png", likes="tea, rain", dislikes="crowds",
                  background="one two three"),
        Character(name="B", likes="cheese"),
    ]
    stats = compute_statistics(chars)
    assert stats["image_stats"] == {"with_image": 1, "without_image": 1}
    assert stats["preferences_stats"] == {"likes": 3, "dislikes": 1}
    assert stats["background_word_counts"] == [3, 0]


def test_age_bucket_fractional_ages():
    """Ages between whole-number bounds land in the lower bucket."""
    assert age_bucket("17.5") == "Under 18"
    assert age_bucket("25.5") == "18-25"
    assert age_bucket("35.9") == "26-35"
    assert age_bucket("50.5") == "36-50"
    assert age_bucket("0") == "Under 18"
