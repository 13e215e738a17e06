from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import List, Optional


class MatchKind(str, Enum):
    """Come una skill richiesta è stata soddisfatta."""
    EXACT = "exact"
    FUZZY = "fuzzy"
    IMPLIES = "implies"              # skill del candidato implica quella richiesta
    TRANSFERABLE = "transferable"    # richiesta trasferibile da una skill del candidato
    RELATED = "related"
    FOUNDATIONAL = "foundational"    # il candidato ha una base implicata dalla richiesta
    NONE = "none"


class SkillMatch(BaseModel):
    """Esito della riconciliazione di una skill richiesta."""
    model_config = ConfigDict(frozen=True)

    required_skill: str
    matched: bool = False
    confidence: int = 0                     # 0-100
    kind: MatchKind = MatchKind.NONE
    candidate_skill: Optional[str] = None   # skill del candidato che ha dato il match


class ProficiencyLevel(str, Enum):
    EXPERT = "expert"
    INTERMEDIATE = "intermediate"
    BEGINNER = "beginner"
    UNKNOWN = "unknown"


PROFICIENCY_MULTIPLIERS = {
    ProficiencyLevel.EXPERT: 1.0,
    ProficiencyLevel.INTERMEDIATE: 0.9,
    ProficiencyLevel.BEGINNER: 0.7,
    ProficiencyLevel.UNKNOWN: 0.7,
}


class SkillProficiency(BaseModel):
    """Livello di padronanza dedotto dalla storia lavorativa."""
    model_config = ConfigDict(frozen=True)

    level: ProficiencyLevel = ProficiencyLevel.UNKNOWN
    mentions: int = 0
    years: int = 0
    recent: bool = False
    advanced_usage: bool = False
    indicators: List[str] = []

    @property
    def multiplier(self) -> float:
        return PROFICIENCY_MULTIPLIERS[self.level]
