from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Optional

from src.models.skill import MatchKind, SkillProficiency


class MatchQuality(str, Enum):
    POOR = "Poor"
    FAIR = "Fair"
    GOOD = "Good"
    VERY_GOOD = "Very Good"
    EXCELLENT = "Excellent"


class RelevanceBucket(str, Enum):
    """Classe di rilevanza della storia lavorativa rispetto al ruolo."""
    DIRECT = "direct"
    RELATED = "related"
    ADJACENT = "adjacent"
    DEPARTMENT_ONLY = "department_only"
    UNRELATED = "unrelated"


class ScoreComponent(BaseModel):
    """Sub-score 0-100 con motivazione leggibile."""
    model_config = ConfigDict(frozen=True)

    score: int
    reason: str


class TitleScore(ScoreComponent):
    bucket: RelevanceBucket = RelevanceBucket.UNRELATED
    matched_roles: List[str] = []
    direct_matches: int = 0
    related_matches: int = 0
    department_matches: int = 0
    max_adjacency_score: int = 0
    adjacency_scores: Dict[str, int] = {}


class SkillsScore(ScoreComponent):
    matched_required: List[str] = []
    partial_required: List[str] = []
    missing_required: List[str] = []
    matched_preferred: List[str] = []
    total_required: int = 0
    total_preferred: int = 0
    top_matches: List[str] = []
    related_skills: List[str] = []
    recent_skills: List[str] = []
    has_recent_experience: bool = False
    match_kinds: Dict[str, MatchKind] = {}
    proficiencies: Dict[str, SkillProficiency] = {}
    strategy: str = ""


class CareerScore(ScoreComponent):
    is_promotion: bool = False
    overqualified: bool = False
    current_level: int = 3
    target_level: int = 3


class ExperienceScore(ScoreComponent):
    total_years: int = 0
    required_range: str = ""
    over_qualified: bool = False
    relevant_entries: int = 0


class IndustryScore(ScoreComponent):
    target_industry: Optional[str] = None
    inferred: bool = False
    matched_industries: List[str] = []
    direct_matches: int = 0
    related_matches: int = 0


class LocationScore(ScoreComponent):
    location_type: str = "onsite"


class EducationScore(ScoreComponent):
    candidate_level: int = 0
    required_level: int = 0


class MatchBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: TitleScore
    skills: SkillsScore
    career: CareerScore
    experience: ExperienceScore
    industry: IndustryScore
    education: EducationScore
    location: LocationScore


class MatchResult(BaseModel):
    """Risultato immutabile di un match candidato/job."""
    model_config = ConfigDict(frozen=True)

    overall_score: int  # 0-100
    match_quality: MatchQuality
    breakdown: MatchBreakdown
    strengths: List[str] = []
    gaps: List[str] = []
    insights: List[str] = []
    recommendation: str = ""
    # Score pesato prima di penalità e cap
    raw_score: int = 0
    completeness: float = 1.0
    missing_fields: List[str] = []
    caps_applied: List[str] = []
