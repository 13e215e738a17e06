"""
Skills Scorer
Riconcilia le skill del candidato con quelle richieste/preferite.

Due strategie intercambiabili dietro la stessa interfaccia SkillReconciler:
- FuzzySkillReconciler: normalizzazione + similarità fuzzy (soglia 85)
- SemanticSkillReconciler: gerarchia statica implies / transferable / related

L'aggregazione è unica: match pieno (>= 70) vale 1, parziale (40-69) vale
confidence/100; ogni credito è moltiplicato per la proficiency dedotta
dalla storia lavorativa prima della conversione in punteggio.
"""

from typing import Dict, List, Optional, Sequence

from src.models.candidate import WorkEntry
from src.models.match_result import SkillsScore
from src.models.skill import (
    MatchKind,
    ProficiencyLevel,
    SkillMatch,
    SkillProficiency,
)
from src.scorers.common import clamp_score, contains_word, mentions, normalize_text, unique
from src.services.date_ranges import YEAR_PATTERN, entry_date_text, is_ongoing, parse_year_span
from src.services.reference_data import ReferenceData, default_reference_data
from src.services.skill_normalizer import DEFAULT_SKILL_THRESHOLD, SkillNormalizer, get_skill_normalizer


# Categorie per skill correlate e skill recenti (iterate in ordine alfabetico)
SKILL_CATEGORIES = {
    "backend": ("Node.js", "Django", "Flask", "Express", "Spring", "Laravel",
                "Ruby on Rails", ".NET", "API Development"),
    "cloud": ("AWS", "Google Cloud", "Azure", "Docker", "Kubernetes", "Terraform",
              "Cloud Architecture"),
    "data": ("Python", "R", "SQL", "Pandas", "NumPy", "Tableau", "Power BI",
             "Machine Learning", "Data Analysis"),
    "database": ("SQL Server", "MySQL", "PostgreSQL", "MongoDB", "Redis", "Oracle",
                 "Cassandra", "DynamoDB"),
    "design": ("Figma", "Adobe Photoshop", "Adobe Illustrator", "Sketch", "UI/UX",
               "Prototyping", "Design Systems"),
    "frontend": ("React", "Vue", "Angular", "HTML", "CSS", "JavaScript", "TypeScript",
                 "Next.js", "Svelte", "UI/UX"),
    "management": ("Project Management", "Agile", "Scrum", "Leadership", "Team Management",
                   "Stakeholder Management"),
    "programming": ("JavaScript", "Python", "Java", "C#", "Go", "Rust", "PHP", "Ruby",
                    "TypeScript", "Swift", "Kotlin", "C++"),
}

ADVANCED_USAGE_KEYWORDS = (
    "led", "managed", "architected", "designed", "expert", "advanced",
    "senior", "principal", "head", "director", "specialized", "certified",
)

REQUIRED_WEIGHT = 80
PREFERRED_WEIGHT = 20
NO_SKILLS_SCORE = 10
MAX_LISTED = 5
MAX_RELATED = 3
RECENT_WINDOW_YEARS = 2


# ═══════════════════════════════════════════════════════════════════════════
# RECONCILER STRATEGIES
# ═══════════════════════════════════════════════════════════════════════════

class SkillReconciler:
    """Decide se le skill del candidato soddisfano una skill richiesta."""

    name = "base"

    def __init__(self, normalizer: Optional[SkillNormalizer] = None):
        self._normalizer = normalizer

    @property
    def normalizer(self) -> SkillNormalizer:
        if self._normalizer is None:
            self._normalizer = get_skill_normalizer()
        return self._normalizer

    def skill_matches(self, candidate_skills: Sequence[str], required_skill: str) -> SkillMatch:
        raise NotImplementedError


class FuzzySkillReconciler(SkillReconciler):
    """Match se la similarità normalizzata supera la soglia; confidenza sempre 100."""

    name = "fuzzy"

    def __init__(self, normalizer: Optional[SkillNormalizer] = None, threshold: int = DEFAULT_SKILL_THRESHOLD):
        super().__init__(normalizer)
        self.threshold = threshold

    def skill_matches(self, candidate_skills: Sequence[str], required_skill: str) -> SkillMatch:
        required = self.normalizer.normalize_skill(required_skill)
        for cv_skill in self.normalizer.normalize_skills(candidate_skills):
            similarity = self.normalizer.similarity(cv_skill, required)
            if similarity >= self.threshold:
                return SkillMatch(
                    required_skill=required,
                    matched=True,
                    confidence=100,
                    kind=MatchKind.EXACT if similarity == 100 else MatchKind.FUZZY,
                    candidate_skill=cv_skill,
                )
        return SkillMatch(required_skill=required)


class SemanticSkillReconciler(SkillReconciler):
    """Gerarchia: exact 100, implies 85, transferable 75, related 60, foundational 40."""

    name = "semantic"

    def __init__(
        self,
        normalizer: Optional[SkillNormalizer] = None,
        reference_data: Optional[ReferenceData] = None,
    ):
        super().__init__(normalizer)
        self._refs = reference_data

    @property
    def hierarchy(self):
        if self._refs is None:
            self._refs = default_reference_data()
        return self._refs.skill_hierarchy

    def skill_matches(self, candidate_skills: Sequence[str], required_skill: str) -> SkillMatch:
        required = self.normalizer.normalize_skill(required_skill)
        required_key = required.lower()
        cv_skills = self.normalizer.normalize_skills(candidate_skills)

        def found(cv_skill: str, confidence: int, kind: MatchKind) -> SkillMatch:
            return SkillMatch(
                required_skill=required,
                matched=True,
                confidence=confidence,
                kind=kind,
                candidate_skill=cv_skill,
            )

        for cv_skill in cv_skills:
            if cv_skill.lower() == required_key:
                return found(cv_skill, 100, MatchKind.EXACT)

        for cv_skill in cv_skills:
            node = self.hierarchy.get(cv_skill.lower())
            if node and required_key in {s.lower() for s in node.implies}:
                return found(cv_skill, 85, MatchKind.IMPLIES)

        node = self.hierarchy.get(required_key)
        if node is not None:
            transferable = {s.lower() for s in node.transferable_from}
            for cv_skill in cv_skills:
                if cv_skill.lower() in transferable:
                    return found(cv_skill, 75, MatchKind.TRANSFERABLE)
            related = {s.lower() for s in node.related}
            for cv_skill in cv_skills:
                if cv_skill.lower() in related:
                    return found(cv_skill, 60, MatchKind.RELATED)
            for implied in node.implies:
                for cv_skill in cv_skills:
                    if cv_skill.lower() == implied.lower():
                        return found(cv_skill, 40, MatchKind.FOUNDATIONAL)

        return SkillMatch(required_skill=required)


RECONCILERS = {
    FuzzySkillReconciler.name: FuzzySkillReconciler,
    SemanticSkillReconciler.name: SemanticSkillReconciler,
}


def build_reconciler(
    strategy: str,
    normalizer: Optional[SkillNormalizer] = None,
    reference_data: Optional[ReferenceData] = None,
    fuzzy_threshold: int = DEFAULT_SKILL_THRESHOLD,
) -> SkillReconciler:
    if strategy == FuzzySkillReconciler.name:
        return FuzzySkillReconciler(normalizer, threshold=fuzzy_threshold)
    if strategy == SemanticSkillReconciler.name:
        return SemanticSkillReconciler(normalizer, reference_data)
    raise ValueError(f"Strategia skill sconosciuta: '{strategy}' (disponibili: {', '.join(RECONCILERS)})")


# ═══════════════════════════════════════════════════════════════════════════
# PROFICIENCY / CONTEXT
# ═══════════════════════════════════════════════════════════════════════════

def _is_recent(date_text: str, current_year: int) -> bool:
    if is_ongoing(date_text):
        return True
    return any(int(y) >= current_year - RECENT_WINDOW_YEARS for y in YEAR_PATTERN.findall(date_text))


def detect_proficiency(skill: str, experience: Sequence[WorkEntry], current_year: int) -> SkillProficiency:
    """Livello dedotto da menzioni, uso recente, anni d'uso e keyword di seniority."""
    skill_lower = normalize_text(skill)
    mention_count = 0
    years = 0
    recent = False
    indicators: List[str] = []

    for entry in experience or []:
        title = normalize_text(entry.title)
        description = normalize_text(entry.description)
        if not (mentions(title, skill_lower) or mentions(description, skill_lower)):
            continue
        mention_count += 1
        date_text = entry_date_text(entry)
        if date_text and _is_recent(date_text, current_year):
            recent = True
        span = parse_year_span(date_text, current_year)
        if span is not None:
            years += span.years
        indicators.extend(k for k in ADVANCED_USAGE_KEYWORDS if contains_word(description, k))

    indicators = unique(indicators)
    advanced = bool(indicators)
    if mention_count == 0:
        level = ProficiencyLevel.UNKNOWN
    elif advanced or years >= 5:
        level = ProficiencyLevel.EXPERT
    elif mention_count >= 2 or recent or years >= 2:
        level = ProficiencyLevel.INTERMEDIATE
    else:
        level = ProficiencyLevel.BEGINNER

    return SkillProficiency(
        level=level,
        mentions=mention_count,
        years=years,
        recent=recent,
        advanced_usage=advanced,
        indicators=indicators,
    )


def find_related_skills(target_skill: str, cv_skills: Sequence[str]) -> List[str]:
    """Skill del CV nella stessa categoria della skill mancante."""
    target = target_skill.lower()
    for category in sorted(SKILL_CATEGORIES):
        members = {s.lower() for s in SKILL_CATEGORIES[category]}
        if target in members:
            return [s for s in cv_skills if s.lower() in members and s.lower() != target]
    return []


def extract_recent_skills(experience: Sequence[WorkEntry]) -> List[str]:
    """Skill note citate nelle descrizioni dei ruoli in corso (ultimi due)."""
    recent: List[str] = []
    for entry in list(experience or [])[:2]:
        if not is_ongoing(entry.duration or entry.end_date or ""):
            continue
        description = normalize_text(entry.description)
        for category in sorted(SKILL_CATEGORIES):
            recent.extend(
                s for s in SKILL_CATEGORIES[category] if mentions(description, s.lower())
            )
    return unique(recent)


# ═══════════════════════════════════════════════════════════════════════════
# AGGREGATION
# ═══════════════════════════════════════════════════════════════════════════

def score_skills(
    candidate_skills: Sequence[str],
    experience: Sequence[WorkEntry],
    required_skills: Sequence[str],
    preferred_skills: Sequence[str],
    reconciler: SkillReconciler,
    current_year: int,
    full_match_confidence: int = 70,
    partial_match_confidence: int = 40,
) -> SkillsScore:
    normalizer = reconciler.normalizer
    cv_skills = normalizer.normalize_skills(candidate_skills)
    required = normalizer.normalize_skills(required_skills)
    preferred = normalizer.normalize_skills(preferred_skills)

    if not cv_skills:
        return SkillsScore(
            score=NO_SKILLS_SCORE,
            reason="No skills listed on CV",
            missing_required=required[:MAX_LISTED],
            total_required=len(required),
            total_preferred=len(preferred),
            strategy=reconciler.name,
        )

    match_kinds: Dict[str, MatchKind] = {}
    proficiencies: Dict[str, SkillProficiency] = {}

    def credit_for(skill: str) -> Optional[SkillMatch]:
        """Match sopra la soglia parziale (con proficiency registrata) o None."""
        match = reconciler.skill_matches(cv_skills, skill)
        match_kinds[skill] = match.kind
        if not match.matched or match.confidence < partial_match_confidence:
            return None
        proficiencies[skill] = detect_proficiency(skill, experience, current_year)
        return match

    def weighted_credit(skill: str, match: SkillMatch) -> float:
        credit = 1.0 if match.confidence >= full_match_confidence else match.confidence / 100
        return credit * proficiencies[skill].multiplier

    matched_required: List[str] = []
    partial_required: List[str] = []
    missing_required: List[str] = []
    top_matches: List[str] = []
    related_skills: List[str] = []
    required_credit = 0.0
    for skill in required:
        match = credit_for(skill)
        if match is None:
            missing_required.append(skill)
            related_skills.extend(find_related_skills(skill, cv_skills))
            continue
        if match.confidence >= full_match_confidence:
            matched_required.append(skill)
        else:
            partial_required.append(skill)
        top_matches.append(match.candidate_skill or skill)
        required_credit += weighted_credit(skill, match)

    if required:
        score = required_credit / len(required) * REQUIRED_WEIGHT
    else:
        score = 50 if len(cv_skills) >= 3 else 30

    matched_preferred: List[str] = []
    preferred_credit = 0.0
    for skill in preferred:
        match = credit_for(skill)
        if match is None:
            continue
        matched_preferred.append(skill)
        preferred_credit += weighted_credit(skill, match)

    if preferred:
        score += preferred_credit / len(preferred) * PREFERRED_WEIGHT
    else:
        score += 10 if len(cv_skills) >= 5 else 5

    if required:
        reason = f"{len(matched_required)}/{len(required)} required skills matched"
        if partial_required:
            reason += f" ({len(partial_required)} partially)"
    else:
        reason = "No required skills specified"

    recent_skills = extract_recent_skills(experience)
    return SkillsScore(
        score=clamp_score(min(100.0, score)),
        reason=reason,
        matched_required=matched_required,
        partial_required=partial_required,
        missing_required=missing_required[:MAX_LISTED],
        matched_preferred=matched_preferred,
        total_required=len(required),
        total_preferred=len(preferred),
        top_matches=unique(top_matches)[:MAX_LISTED],
        related_skills=unique(related_skills)[:MAX_RELATED],
        recent_skills=recent_skills,
        has_recent_experience=bool(recent_skills),
        match_kinds=match_kinds,
        proficiencies=proficiencies,
        strategy=reconciler.name,
    )
