"""
Location Matcher
Normalizza località libere ("JHB", "Cape Town, SA") e verifica se due località coincidono.
"""

import re
from typing import Optional

from rapidfuzz.distance import Levenshtein

from src.services.reference_data import ReferenceData, default_reference_data


DEFAULT_LOCATION_THRESHOLD = 85

# Ordinati per lunghezza decrescente: "united states" prima di "us"
COUNTRY_CODES = (
    ("south africa", "ZA"),
    ("germany", "DE"),
    ("united kingdom", "GB"),
    ("uk", "GB"),
    ("united states", "US"),
    ("usa", "US"),
    ("canada", "CA"),
    ("australia", "AU"),
    ("france", "FR"),
    ("spain", "ES"),
    ("italy", "IT"),
    ("netherlands", "NL"),
    ("belgium", "BE"),
    ("switzerland", "CH"),
    ("austria", "AT"),
    ("poland", "PL"),
    ("ireland", "IE"),
    ("india", "IN"),
    ("china", "CN"),
    ("japan", "JP"),
)
_COUNTRY_CODES_BY_LENGTH = tuple(sorted(COUNTRY_CODES, key=lambda item: (-len(item[0]), item[0])))


def extract_country(location: Optional[str]) -> Optional[str]:
    """Codice ISO del paese citato nella località, se presente."""
    if not location:
        return None
    text = location.lower()
    for name, code in _COUNTRY_CODES_BY_LENGTH:
        if re.search(rf"(?<![a-z]){re.escape(name)}(?![a-z])", text):
            return code
    return None


class LocationMatcher:

    def __init__(self, reference_data: Optional[ReferenceData] = None):
        refs = reference_data or default_reference_data()
        self._lookup = {}
        for canonical, aliases in refs.location_synonyms:
            self._lookup.setdefault(canonical.lower(), canonical.lower())
            for alias in aliases:
                self._lookup.setdefault(alias, canonical.lower())

    def normalize_location(self, location: Optional[str]) -> str:
        """Lowercase, punteggiatura rimossa, alias risolti parte per parte."""
        if not location:
            return ""
        parts = []
        for raw in re.split(r"[,/;|]", location.lower()):
            part = " ".join(raw.split()).strip(" .-")
            if not part:
                continue
            part = self._lookup.get(part, part)
            if part not in parts:
                parts.append(part)
        return ", ".join(parts)

    def locations_match(
        self,
        location_a: Optional[str],
        location_b: Optional[str],
        threshold: int = DEFAULT_LOCATION_THRESHOLD,
    ) -> bool:
        a = self.normalize_location(location_a)
        b = self.normalize_location(location_b)
        if not a or not b:
            return False
        if a == b or a in b or b in a:
            return True
        return Levenshtein.normalized_similarity(a, b) * 100 >= threshold


_default_matcher: Optional[LocationMatcher] = None


def get_location_matcher() -> LocationMatcher:
    global _default_matcher
    if _default_matcher is None:
        _default_matcher = LocationMatcher()
    return _default_matcher


def locations_match(location_a: Optional[str], location_b: Optional[str], threshold: int = DEFAULT_LOCATION_THRESHOLD) -> bool:
    return get_location_matcher().locations_match(location_a, location_b, threshold)
