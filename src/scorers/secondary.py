"""
Location & Education Scorers
Scorer secondari a regole (peso 5% ciascuno).
"""

import re
from typing import Optional, Union, List

from src.models.candidate import Education
from src.models.match_result import EducationScore, LocationScore
from src.services.location_matcher import LocationMatcher, extract_country, get_location_matcher


# ═══════════════════════════════════════════════════════════════════════════
# LOCATION
# ═══════════════════════════════════════════════════════════════════════════

def score_location(
    candidate_location: Optional[str],
    job_location: Optional[str],
    location_type: Optional[str] = "onsite",
    threshold: int = 85,
    matcher: Optional[LocationMatcher] = None,
) -> LocationScore:
    """Per ruoli remote la località è irrilevante; per onsite pesa molto."""
    location_type = (location_type or "onsite").lower()
    matcher = matcher or get_location_matcher()
    candidate = matcher.normalize_location(candidate_location)
    job = matcher.normalize_location(job_location)

    def result(score: int, reason: str) -> LocationScore:
        return LocationScore(score=score, reason=reason, location_type=location_type)

    if location_type == "remote":
        return result(100, "Remote work - location irrelevant")

    if location_type == "hybrid":
        if candidate and job and (candidate in job or job in candidate):
            return result(100, "Hybrid + location match - ideal")
        return result(80, "Hybrid work - location flexible")

    if not job:
        return result(70, "No location requirement specified")
    if not candidate:
        return result(30, "No location information in CV (onsite role)")
    if matcher.locations_match(candidate_location, job_location, threshold):
        return result(100, "Location match (onsite role)")

    candidate_country = extract_country(candidate)
    if candidate_country and candidate_country == extract_country(job):
        return result(50, "Same country, different city (onsite role)")
    return result(20, "Location mismatch for onsite role")


# ═══════════════════════════════════════════════════════════════════════════
# EDUCATION
# ═══════════════════════════════════════════════════════════════════════════

EDUCATION_LEVELS = {
    "high school": 1,
    "associate degree": 2,
    "bachelor's degree": 3,
    "bachelor": 3,
    "bcom": 3,
    "bsc": 3,
    "ba": 3,
    "master's degree": 4,
    "master": 4,
    "mba": 4,
    "msc": 4,
    "ma": 4,
    "doctorate": 5,
    "phd": 5,
}
_LEVEL_PATTERNS = tuple(
    (re.compile(rf"(?<![a-z]){re.escape(name)}(?:'?s)?(?![a-z])"), level)
    for name, level in sorted(EDUCATION_LEVELS.items(), key=lambda item: (-len(item[0]), item[0]))
)

CandidateEducation = Union[Education, str, List[Union[Education, str]], None]


def education_text(education: CandidateEducation) -> str:
    """Testo del titolo: primo elemento se lista, campo degree se strutturato."""
    if isinstance(education, list):
        education = education[0] if education else None
    if isinstance(education, Education):
        education = education.degree
    return (education or "").lower()


def education_level(text: Optional[str]) -> int:
    """Livello massimo (1-5) tra le keyword trovate; 0 se nessuna."""
    text = (text or "").lower()
    level = 0
    for pattern, value in _LEVEL_PATTERNS:
        if pattern.search(text):
            level = max(level, value)
    return level


def score_education(candidate_education: CandidateEducation, required_education: Optional[str]) -> EducationScore:
    if not (required_education or "").strip():
        return EducationScore(score=70, reason="No education requirement specified")

    required_level = education_level(required_education)
    if required_level == 0:
        return EducationScore(score=60, reason="Could not determine education requirement")

    candidate_level = education_level(education_text(candidate_education))
    gap = required_level - candidate_level
    if candidate_level == 0:
        score, reason = 15, "No education information provided"
    elif gap <= 0:
        score, reason = 100, "Meets or exceeds education requirement"
    elif gap == 1:
        score, reason = 65, "One level below required education"
    elif gap == 2:
        score, reason = 35, "Two levels below required education"
    else:
        score, reason = 15, "Does not meet education requirement"
    return EducationScore(
        score=score,
        reason=reason,
        candidate_level=candidate_level,
        required_level=required_level,
    )
