"""
Experience Duration & Range Scorer
Anni di esperienza rilevante (filtrata per ruolo) confrontati con il range richiesto.
"""

from typing import List, Optional, Sequence

from src.models.candidate import WorkEntry
from src.models.match_result import ExperienceScore
from src.scorers.common import clamp_score, normalize_text
from src.services.date_ranges import ESTIMATED_YEARS_PER_ENTRY, total_span_years


ROLE_KEYWORDS = (
    "developer", "engineer", "designer", "manager", "analyst", "consultant",
    "architect", "lead", "director", "coordinator", "specialist", "administrator",
    "technician", "sales", "marketing", "accountant", "clerk", "assistant",
    "chef", "waiter", "driver", "receptionist", "officer", "supervisor",
    "representative", "agent", "associate", "executive", "programmer",
)
SIGNIFICANT_WORD_LENGTH = 3
OVERQUALIFIED_MARGIN = 2


def is_relevant_experience(entry_title: Optional[str], target_title: Optional[str]) -> bool:
    """
    Filtro di rilevanza per il conteggio degli anni: stessa keyword di ruolo
    principale, oppure una parola significativa (> 3 caratteri) in comune.
    """
    job = normalize_text(entry_title)
    target = normalize_text(target_title)
    if not job or not target:
        return False

    primary_role = next((k for k in ROLE_KEYWORDS if k in target), None)
    if primary_role and primary_role in job:
        return True

    target_words = [w for w in target.split() if len(w) > SIGNIFICANT_WORD_LENGTH]
    job_words = [w for w in job.split() if len(w) > SIGNIFICANT_WORD_LENGTH]
    return any(
        job_word in target_word or target_word in job_word
        for target_word in target_words
        for job_word in job_words
    )


def relevant_entries(experience: Sequence[WorkEntry], job_title: Optional[str]) -> List[WorkEntry]:
    if not (job_title or "").strip():
        return list(experience or [])
    return [e for e in experience or [] if is_relevant_experience(e.title, job_title)]


def relevant_years(experience: Sequence[WorkEntry], job_title: Optional[str], current_year: int) -> int:
    """Anni dal primo inizio all'ultima fine tra le esperienze rilevanti."""
    relevant = relevant_entries(experience, job_title)
    if not relevant:
        return 0
    total = total_span_years(relevant, current_year)
    if total is None:
        return len(relevant) * ESTIMATED_YEARS_PER_ENTRY
    return total


def score_range(total_years: int, min_years: int, max_years: Optional[int]):
    """(score, reason) per la posizione degli anni rispetto a [min, max]."""
    upper = max_years if max_years is not None else float("inf")
    if min_years <= total_years <= upper:
        return 100, "Experience within desired range"
    if total_years < min_years:
        short = min_years - total_years
        if short <= 1:
            return 85, "Slightly below minimum experience"
        return max(0, 100 - 15 * short), f"{short} year(s) below minimum"
    over = total_years - max_years
    if over <= 1:
        return 95, "Slightly more experienced than required"
    if over <= 3:
        return 85, "Moderately over-experienced"
    if over <= 5:
        return 70, "Significantly over-experienced - retention risk"
    return max(50, 70 - 5 * (over - 5)), "Highly over-qualified - high retention risk"


def score_experience(
    experience: Sequence[WorkEntry],
    job_title: Optional[str],
    min_years: int,
    max_years: Optional[int],
    current_year: int,
) -> ExperienceScore:
    relevant = relevant_entries(experience, job_title)
    total = relevant_years(experience, job_title, current_year)
    score, reason = score_range(total, min_years, max_years)
    if max_years is None:
        required_range = f"{min_years}+"
    else:
        required_range = f"{min_years}-{max_years}"
    return ExperienceScore(
        score=clamp_score(score),
        reason=reason,
        total_years=total,
        required_range=required_range,
        over_qualified=max_years is not None and total > max_years + OVERQUALIFIED_MARGIN,
        relevant_entries=len(relevant),
    )
