"""
Role Relevance Scorer
Quanto la storia lavorativa del candidato è rilevante per il job title.

Ogni esperienza viene classificata (direct / related / department) usando
l'adiacenza tra titoli e, come fallback, l'overlap di keyword di ruolo.
I conteggi producono un unico RelevanceBucket, poi mappato a uno score.
Questo score è il gate principale usato dal composer per i cap.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from src.models.candidate import WorkEntry
from src.models.match_result import RelevanceBucket, TitleScore
from src.scorers.common import clamp_score, mentions, normalize_text, unique
from src.services.reference_data import ReferenceData
from src.services.title_adjacency import adjacency


NOISE_WORDS = ("the", "a", "an", "and", "or", "of", "to", "in", "for", "with")

ROLE_SYNONYMS = {
    "developer": ("engineer", "programmer", "coder", "development"),
    "engineer": ("developer", "engineering"),
    "manager": ("management", "lead", "supervisor", "director"),
    "designer": ("design", "creative", "ux", "ui"),
    "analyst": ("analysis", "analytics", "data"),
    "accountant": ("accounting", "finance", "bookkeeping", "tax"),
    "dancer": ("dance", "performer", "choreographer", "dancing", "performance"),
    "teacher": ("teaching", "instructor", "educator", "tutor"),
    "nurse": ("nursing", "healthcare", "medical"),
    "chef": ("cook", "culinary", "kitchen", "food"),
    "sales": ("salesperson", "account executive", "business development"),
    "marketing": ("marketer", "brand", "campaign"),
}

DIRECT_ADJACENCY = 80
RELATED_ADJACENCY = 50
WEAK_ADJACENCY = 30
KEYWORD_OVERLAP_RATIO = 0.6
MAX_MATCHED_ROLES = 3


def extract_role_keywords(job_title: Optional[str]) -> List[str]:
    """Parole significative del titolo più i sinonimi di ruolo."""
    words = [w for w in normalize_text(job_title).split() if w not in NOISE_WORDS]
    keywords = list(words)
    for word in words:
        keywords.extend(ROLE_SYNONYMS.get(word, ()))
    return unique(keywords)


def matches_role_keywords(entry: WorkEntry, keywords: Sequence[str]) -> bool:
    """Almeno il 60% delle keyword di ruolo compare in titolo + descrizione."""
    if not keywords:
        return False
    combined = f"{normalize_text(entry.title)} {normalize_text(entry.description)}"
    hits = sum(1 for keyword in keywords if mentions(combined, keyword))
    return hits >= math.ceil(len(keywords) * KEYWORD_OVERLAP_RATIO)


@dataclass
class RelevanceCounts:
    direct: int = 0
    related: int = 0
    department: int = 0
    max_adjacency: int = 0
    matched_roles: List[str] = field(default_factory=list)
    adjacency_scores: Dict[str, int] = field(default_factory=dict)

    @property
    def best_adjacent_role(self) -> str:
        for role, score in self.adjacency_scores.items():
            if score == self.max_adjacency:
                return role
        return "previous role"


def count_relevance(
    experience: Sequence[WorkEntry],
    job_title: str,
    department: Optional[str],
    reference_data: Optional[ReferenceData] = None,
) -> RelevanceCounts:
    counts = RelevanceCounts()
    job_title_lower = normalize_text(job_title)
    department_lower = normalize_text(department)
    keywords = extract_role_keywords(job_title)

    for entry in experience:
        entry_title = normalize_text(entry.title)
        score = adjacency(entry.title, job_title, reference_data)
        if score > 0:
            counts.adjacency_scores[entry.title or "Unknown"] = score
            counts.max_adjacency = max(counts.max_adjacency, score)

        substring_match = bool(entry_title) and (
            job_title_lower in entry_title or entry_title in job_title_lower
        )
        if score >= DIRECT_ADJACENCY or substring_match:
            counts.direct += 1
            counts.matched_roles.append(entry.title or "Unknown")
            continue
        if score >= RELATED_ADJACENCY:
            counts.related += 1
            counts.matched_roles.append(entry.title or "Unknown")
            continue

        if matches_role_keywords(entry, keywords):
            counts.related += 1
            counts.matched_roles.append(entry.title or "Unknown")

        combined = f"{entry_title} {normalize_text(entry.description)}"
        if department_lower and department_lower in combined:
            counts.department += 1
    return counts


def classify_relevance(counts: RelevanceCounts) -> RelevanceBucket:
    if counts.direct > 0:
        return RelevanceBucket.DIRECT
    if counts.related > 0:
        return RelevanceBucket.RELATED
    if counts.max_adjacency >= WEAK_ADJACENCY:
        return RelevanceBucket.ADJACENT
    if counts.department > 0:
        return RelevanceBucket.DEPARTMENT_ONLY
    return RelevanceBucket.UNRELATED


def _direct(counts: RelevanceCounts, job_title: str, department: str):
    score = min(100, 80 + 10 * counts.direct)
    if counts.max_adjacency == 100:
        return score, f"Exact role match: {counts.direct} similar position(s)"
    if counts.max_adjacency >= DIRECT_ADJACENCY:
        return score, f"Highly relevant experience: {counts.matched_roles[0]}"
    return score, f"Direct match: {counts.direct} similar role(s)"


def _related(counts: RelevanceCounts, job_title: str, department: str):
    score = min(70, 45 + 15 * counts.related)
    if counts.max_adjacency >= RELATED_ADJACENCY:
        return score, (
            f"Related experience ({counts.max_adjacency}% similarity): {counts.matched_roles[0]}"
        )
    return score, f"Related experience in {counts.related} role(s)"


def _adjacent(counts: RelevanceCounts, job_title: str, department: str):
    score = max(25, counts.max_adjacency * 0.5)
    return score, f"Some transferable skills from {counts.best_adjacent_role}"


def _department_only(counts: RelevanceCounts, job_title: str, department: str):
    return min(40, 20 + 10 * counts.department), f"Some experience in {department} field"


def _unrelated(counts: RelevanceCounts, job_title: str, department: str):
    score = max(5, counts.max_adjacency * 0.5)
    if counts.max_adjacency > 0:
        return score, (
            f"Distant field ({counts.max_adjacency}% similarity) - limited transferability"
        )
    return score, f"No relevant experience for {job_title} position"


BUCKET_SCORERS: Dict[RelevanceBucket, Callable] = {
    RelevanceBucket.DIRECT: _direct,
    RelevanceBucket.RELATED: _related,
    RelevanceBucket.ADJACENT: _adjacent,
    RelevanceBucket.DEPARTMENT_ONLY: _department_only,
    RelevanceBucket.UNRELATED: _unrelated,
}


def score_title(
    experience: Sequence[WorkEntry],
    job_title: Optional[str],
    department: Optional[str] = None,
    reference_data: Optional[ReferenceData] = None,
) -> TitleScore:
    """Score 0-100 di rilevanza dei ruoli ricoperti rispetto al job title."""
    if not (job_title or "").strip() or not experience:
        return TitleScore(score=50, reason="Insufficient information to assess role relevance")

    counts = count_relevance(experience, job_title, department, reference_data)
    bucket = classify_relevance(counts)
    raw, reason = BUCKET_SCORERS[bucket](counts, job_title, department or "")
    return TitleScore(
        score=clamp_score(raw),
        reason=reason,
        bucket=bucket,
        matched_roles=unique(counts.matched_roles)[:MAX_MATCHED_ROLES],
        direct_matches=counts.direct,
        related_matches=counts.related,
        department_matches=counts.department,
        max_adjacency_score=counts.max_adjacency,
        adjacency_scores=counts.adjacency_scores,
    )
