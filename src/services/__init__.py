# services package
"""Reference data and helper services used by the scorers."""

from src.services.reference_data import ReferenceData, SkillNode, load_reference_data, default_reference_data
from src.services.skill_normalizer import SkillNormalizer, normalize_skills, skills_match
from src.services.location_matcher import LocationMatcher, locations_match, extract_country
from src.services.title_adjacency import adjacency, strip_seniority

__all__ = [
    "ReferenceData",
    "SkillNode",
    "load_reference_data",
    "default_reference_data",
    "SkillNormalizer",
    "normalize_skills",
    "skills_match",
    "LocationMatcher",
    "locations_match",
    "extract_country",
    "adjacency",
    "strip_seniority",
]
