import pytest

from assistant.categories import (
    CATEGORY_KEYWORDS,
    CategoryResolver,
    supported_categories_help,
)


@pytest.mark.parametrize(
    "utterance, expected",
    [
        ("Where is the nearest hospital?", "healthcare.hospital"),
        ("I need an AMBULANCE now", "service.ambulance_station"),
        ("fire station please", "service.fire_station"),
        ("Is there a shelter around?", "service.social_facility.shelter"),
        ("closest pharmacy", "healthcare.pharmacy"),
        ("public toilet", "amenity.toilet"),
        ("where can I get drinking water", "amenity.drinking_water"),
    ],
)
def test_resolves_configured_keywords(utterance, expected):
    assert CategoryResolver().resolve(utterance) == expected


def test_police_station_resolves_with_default_table():
    assert CategoryResolver().resolve("Where is the nearest police station?") == "service.police"


def test_police_station_resolves_with_either_table_order():
    reordered = tuple(reversed(CATEGORY_KEYWORDS))
    for table in (CATEGORY_KEYWORDS, reordered):
        for longest_first in (True, False):
            resolver = CategoryResolver(table, longest_first=longest_first)
            assert resolver.resolve("Where is the nearest police station?") == "service.police"


def test_longest_keyword_wins_regardless_of_order():
    short_first = (("police", "test.generic"), ("police station", "test.station"))
    long_first = tuple(reversed(short_first))

    assert CategoryResolver(short_first).resolve("the police station") == "test.station"
    assert CategoryResolver(long_first).resolve("the police station") == "test.station"
    assert CategoryResolver(short_first).resolve("call the police") == "test.generic"


def test_table_order_scan_when_tie_break_disabled():
    short_first = (("police", "test.generic"), ("police station", "test.station"))
    resolver = CategoryResolver(short_first, longest_first=False)
    assert resolver.resolve("the police station") == "test.generic"


def test_equal_length_keywords_keep_table_order():
    table = (("aaaa", "first"), ("bbbb", "second"))
    assert CategoryResolver(table).resolve("bbbb aaaa") == "first"


@pytest.mark.parametrize("utterance", ["", "hello there", "I feel unwell", None])
def test_unmatched_utterance_is_not_found(utterance):
    assert CategoryResolver().resolve(utterance) is None


def test_empty_table_rejected():
    with pytest.raises(ValueError):
        CategoryResolver(())


def test_help_lists_supported_places():
    text = supported_categories_help()
    assert text.startswith("I can help you find nearby:")
    for place in ("Hospitals", "Police stations", "Pharmacies", "Drinking water"):
        assert f"- {place}" in text
