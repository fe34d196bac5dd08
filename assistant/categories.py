"""
Category resolution for emergency mode.

Maps a free-text request ("where is the nearest police station?") to a
Geoapify place-category identifier using a fixed keyword table.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# Keyword -> Geoapify category. Order is the table order; see
# CategoryResolver for how overlapping keywords are scanned.
CATEGORY_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("hospital", "healthcare.hospital"),
    ("police", "service.police"),
    ("police station", "service.police"),
    ("ambulance", "service.ambulance_station"),
    ("fire station", "service.fire_station"),
    ("shelter", "service.social_facility.shelter"),
    ("pharmacy", "healthcare.pharmacy"),
    ("toilet", "amenity.toilet"),
    ("water", "amenity.drinking_water"),
    ("drinking water", "amenity.drinking_water"),
)

SUPPORTED_CATEGORIES_HELP = (
    "I can help you find nearby:\n"
    "- Hospitals\n"
    "- Police stations\n"
    "- Fire stations\n"
    "- Shelters\n"
    "- Pharmacies\n"
    "- Public toilets\n"
    "- Drinking water\n"
    "\n"
    "Just ask 'Where is the nearest [place]?'"
)


def supported_categories_help() -> str:
    return SUPPORTED_CATEGORIES_HELP


class CategoryResolver:
    """Substring keyword matcher over an ordered keyword table.

    With ``longest_first`` (the default) keywords are tried longest first,
    so "police station" wins over "police" whatever the table order.
    Equal-length keywords keep their table order. With
    ``longest_first=False`` the table is scanned exactly as given.
    """

    def __init__(
        self,
        keywords: tuple[tuple[str, str], ...] = CATEGORY_KEYWORDS,
        *,
        longest_first: bool = True,
    ) -> None:
        if not keywords:
            raise ValueError("category keyword table must not be empty")
        entries = tuple((kw.lower(), category) for kw, category in keywords)
        if longest_first:
            entries = tuple(sorted(entries, key=lambda item: -len(item[0])))
        self._entries = entries

    @property
    def keywords(self) -> tuple[str, ...]:
        return tuple(kw for kw, _ in self._entries)

    def resolve(self, utterance: str) -> str | None:
        """Return the category for *utterance*, or None when nothing matches."""
        text = (utterance or "").lower()
        for keyword, category in self._entries:
            if keyword in text:
                logger.info("Resolved %r -> %s (keyword %r)", utterance, category, keyword)
                return category
        logger.info("No category keyword in %r", utterance)
        return None
