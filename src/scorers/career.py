"""
Career Progression Analyzer
Confronta il livello di seniority dell'ultimo ruolo del candidato con quello del ruolo target.
"""

import re
from typing import Callable, NamedTuple, Optional, Sequence

from src.models.candidate import WorkEntry
from src.models.match_result import CareerScore


# Ordine della tabella = criterio di parità a livello uguale
SENIORITY_LEVELS = (
    ("junior", 1),
    ("associate", 2),
    ("mid-level", 3),
    ("senior", 4),
    ("lead", 5),
    ("principal", 6),
    ("staff", 6),
    ("manager", 5),
    ("director", 7),
    ("vp", 8),
    ("head", 7),
    ("chief", 9),
    ("cto", 9),
    ("ceo", 10),
)
DEFAULT_LEVEL = 3

# Forme flesse accettate oltre alla keyword ("Team Leader")
KEYWORD_SUFFIXES = {"lead": "(?:er)?"}

# sorted() è stabile: a parità di livello resta l'ordine della tabella
_LEVEL_SCAN = tuple(
    (re.compile(rf"(?<![a-z]){re.escape(keyword)}{KEYWORD_SUFFIXES.get(keyword, '')}(?![a-z])"), level)
    for keyword, level in sorted(SENIORITY_LEVELS, key=lambda item: -item[1])
)


def seniority_level(title: Optional[str]) -> int:
    """Livello 1-10 della prima keyword trovata partendo dal livello più alto."""
    text = (title or "").lower()
    for pattern, level in _LEVEL_SCAN:
        if pattern.search(text):
            return level
    return DEFAULT_LEVEL


class ProgressionRule(NamedTuple):
    applies: Callable[[int, int], bool]     # (current, target) → bool
    score: int
    reason: str
    is_promotion: bool = False
    overqualified: bool = False


PROGRESSION_RULES = (
    ProgressionRule(lambda cur, tgt: cur == tgt, 90, "Lateral move - matching seniority level"),
    ProgressionRule(lambda cur, tgt: tgt == cur + 1, 95, "Natural promotion opportunity", is_promotion=True),
    ProgressionRule(lambda cur, tgt: tgt == cur + 2, 75, "Stretch role - significant step up", is_promotion=True),
    ProgressionRule(lambda cur, tgt: cur > tgt + 1, 60, "Overqualified - may have retention concerns", overqualified=True),
    ProgressionRule(lambda cur, tgt: cur < tgt - 2, 40, "Under-experienced for target seniority"),
)
BASELINE = ProgressionRule(lambda cur, tgt: True, 70, "Standard career fit")


def score_career(experience: Sequence[WorkEntry], job_title: Optional[str]) -> CareerScore:
    if not experience:
        return CareerScore(score=50, reason="No work experience provided")

    current = seniority_level(experience[0].title)
    if not (job_title or "").strip():
        return CareerScore(
            score=BASELINE.score,
            reason="Target role not specified - standard career fit assumed",
            current_level=current,
        )

    target = seniority_level(job_title)
    rule = next((r for r in PROGRESSION_RULES if r.applies(current, target)), BASELINE)
    return CareerScore(
        score=rule.score,
        reason=rule.reason,
        is_promotion=rule.is_promotion,
        overqualified=rule.overqualified,
        current_level=current,
        target_level=target,
    )
