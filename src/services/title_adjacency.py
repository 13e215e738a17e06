"""
Title Adjacency
Quanto sono trasferibili esperienza e competenze tra due job title (0-100).

Ordine di valutazione:
1. Match esatto (case-insensitive) → 100
2. Stesso ruolo a seniority diversa ("Senior X" vs "X") → 95
3. Tabella di adiacenza: lookup diretto (target come base), poi inverso (candidato come base)
4. Match via core senza seniority → score tabella - 5, minimo 85
5. Nessun match → 10
"""

import re
from typing import Optional

from src.services.reference_data import ReferenceData, default_reference_data


SENIORITY_PREFIXES = (
    "senior", "sr", "lead", "principal", "staff", "junior", "jr", "associate",
    "entry level", "mid-level", "chief", "head of", "vp", "vice president",
)
_PREFIX_PATTERNS = tuple(
    re.compile(rf"^{re.escape(prefix)}\.?\s+") for prefix in SENIORITY_PREFIXES
)

EXACT_MATCH = 100
SAME_ROLE_DIFFERENT_SENIORITY = 95
CORE_MATCH_PENALTY = 5
CORE_MATCH_FLOOR = 85
UNRELATED = 10


def strip_seniority(title: Optional[str]) -> str:
    """Rimuove i prefissi di seniority (lowercase)."""
    core = " ".join((title or "").lower().split())
    for pattern in _PREFIX_PATTERNS:
        core = pattern.sub("", core)
    return core.strip()


def _overlaps(a: str, b: str) -> bool:
    return bool(a) and bool(b) and (a in b or b in a)


def _lookup(base_side: str, base_core: str, other: str, other_core: str, refs: ReferenceData) -> Optional[int]:
    """Cerca `other` tra i titoli correlati dei base title che corrispondono a `base_side`."""
    for base, related in refs.title_adjacency:
        base_lower = base.lower()
        if _overlaps(base_side, base_lower):
            for related_title, score in related:
                if _overlaps(other, related_title.lower()):
                    return score
        if _overlaps(base_core, base_lower):
            for related_title, score in related:
                if _overlaps(other_core, related_title.lower()):
                    return max(score - CORE_MATCH_PENALTY, CORE_MATCH_FLOOR)
    return None


def adjacency(
    candidate_title: Optional[str],
    target_title: Optional[str],
    reference_data: Optional[ReferenceData] = None,
) -> int:
    """Score di adiacenza 0-100 tra il titolo del candidato e quello target."""
    candidate = " ".join((candidate_title or "").lower().split())
    target = " ".join((target_title or "").lower().split())
    if not candidate or not target:
        return 0
    if candidate == target:
        return EXACT_MATCH

    candidate_core = strip_seniority(candidate)
    target_core = strip_seniority(target)
    if candidate_core and candidate_core == target_core:
        return SAME_ROLE_DIFFERENT_SENIORITY

    refs = reference_data or default_reference_data()
    score = _lookup(target, target_core, candidate, candidate_core, refs)
    if score is None:
        score = _lookup(candidate, candidate_core, target, target_core, refs)
    return UNRELATED if score is None else score
