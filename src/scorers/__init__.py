# scorers package
"""Pure scoring functions, one per match dimension."""

from src.scorers.title import score_title, extract_role_keywords, matches_role_keywords
from src.scorers.skills import (
    SkillReconciler,
    FuzzySkillReconciler,
    SemanticSkillReconciler,
    build_reconciler,
    detect_proficiency,
    score_skills,
)
from src.scorers.career import score_career, seniority_level
from src.scorers.experience import is_relevant_experience, relevant_years, score_experience
from src.scorers.industry import infer_industry, score_industry
from src.scorers.secondary import score_education, score_location

__all__ = [
    "score_title",
    "extract_role_keywords",
    "matches_role_keywords",
    "SkillReconciler",
    "FuzzySkillReconciler",
    "SemanticSkillReconciler",
    "build_reconciler",
    "detect_proficiency",
    "score_skills",
    "score_career",
    "seniority_level",
    "is_relevant_experience",
    "relevant_years",
    "score_experience",
    "infer_industry",
    "score_industry",
    "score_education",
    "score_location",
]
