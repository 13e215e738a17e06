"""
Skill Normalizer
Canonicalizza i nomi delle skill (alias → nome ufficiale) e confronta skill
con similarità fuzzy (Levenshtein normalizzata via rapidfuzz).

Strategia di confronto:
1. Nomi canonici identici → 100
2. Uno contiene l'altro → 90
3. Altrimenti similarità di Levenshtein * 100
"""

from typing import Iterable, List, Optional

from rapidfuzz.distance import Levenshtein

from src.services.reference_data import ReferenceData, default_reference_data


DEFAULT_SKILL_THRESHOLD = 85
CONTAINMENT_SIMILARITY = 90


class SkillNormalizer:
    """Lookup alias → nome canonico costruito dalla tabella dei sinonimi."""

    def __init__(self, reference_data: Optional[ReferenceData] = None):
        refs = reference_data or default_reference_data()
        self._lookup = {}
        for canonical, aliases in refs.skill_synonyms:
            # Vince la prima voce della tabella
            self._lookup.setdefault(canonical.lower(), canonical)
            for alias in aliases:
                self._lookup.setdefault(alias, canonical)

    def normalize_skill(self, skill: Optional[str]) -> str:
        if not skill:
            return ""
        text = " ".join(str(skill).split())
        return self._lookup.get(text.lower(), text)

    def normalize_skills(self, skills: Optional[Iterable[str]]) -> List[str]:
        """Normalizza e deduplica (case-insensitive) mantenendo l'ordine."""
        seen = set()
        out: List[str] = []
        for skill in skills or []:
            normalized = self.normalize_skill(skill)
            key = normalized.lower()
            if not normalized or key in seen:
                continue
            seen.add(key)
            out.append(normalized)
        return out

    def similarity(self, skill_a: Optional[str], skill_b: Optional[str]) -> int:
        a = self.normalize_skill(skill_a).lower()
        b = self.normalize_skill(skill_b).lower()
        if not a or not b:
            return 0
        if a == b:
            return 100
        if a in b or b in a:
            return CONTAINMENT_SIMILARITY
        return int(round(Levenshtein.normalized_similarity(a, b) * 100))

    def skills_match(
        self,
        skill_a: Optional[str],
        skill_b: Optional[str],
        threshold: int = DEFAULT_SKILL_THRESHOLD,
    ) -> bool:
        return self.similarity(skill_a, skill_b) >= threshold


_default_normalizer: Optional[SkillNormalizer] = None


def get_skill_normalizer() -> SkillNormalizer:
    """Normalizer condiviso (lazy init)."""
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = SkillNormalizer()
    return _default_normalizer


def normalize_skills(skills: Optional[Iterable[str]]) -> List[str]:
    return get_skill_normalizer().normalize_skills(skills)


def skills_match(skill_a: Optional[str], skill_b: Optional[str], threshold: int = DEFAULT_SKILL_THRESHOLD) -> bool:
    return get_skill_normalizer().skills_match(skill_a, skill_b, threshold)
