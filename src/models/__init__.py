# models package
"""Data models for the CV-to-job matching engine."""

from src.models.skill import MatchKind, SkillMatch, ProficiencyLevel, SkillProficiency
from src.models.job import JobSpecification
from src.models.candidate import CandidateProfile, WorkEntry, Education
from src.models.match_result import (
    MatchQuality,
    RelevanceBucket,
    ScoreComponent,
    TitleScore,
    SkillsScore,
    CareerScore,
    ExperienceScore,
    IndustryScore,
    LocationScore,
    EducationScore,
    MatchBreakdown,
    MatchResult,
)

__all__ = [
    "MatchKind",
    "SkillMatch",
    "ProficiencyLevel",
    "SkillProficiency",
    "JobSpecification",
    "CandidateProfile",
    "WorkEntry",
    "Education",
    "MatchQuality",
    "RelevanceBucket",
    "ScoreComponent",
    "TitleScore",
    "SkillsScore",
    "CareerScore",
    "ExperienceScore",
    "IndustryScore",
    "LocationScore",
    "EducationScore",
    "MatchBreakdown",
    "MatchResult",
]
