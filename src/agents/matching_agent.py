"""
Matching Agent
Score composer: calcola il match tra un profilo candidato e una job specification.

Responsabilità:
- Invoca ogni scorer una volta per coppia (candidato, job)
- Combina i sub-score con pesi configurabili (somma 1.0)
- Applica penalità di completezza del CV e cap di sicurezza
- Genera strengths / gaps / insights, quality band e raccomandazione
"""

from typing import List, Optional, Tuple

import numpy as np

from src.config import MatcherConfig
from src.models.candidate import CandidateProfile, Education
from src.models.job import JobSpecification
from src.models.match_result import (
    CareerScore,
    MatchBreakdown,
    MatchQuality,
    MatchResult,
    SkillsScore,
)
from src.scorers.career import score_career
from src.scorers.common import round_half_up
from src.scorers.experience import score_experience
from src.scorers.industry import score_industry
from src.scorers.secondary import score_education, score_location
from src.scorers.skills import SkillReconciler, build_reconciler, score_skills
from src.scorers.title import score_title
from src.services.date_ranges import resolve_current_year
from src.services.location_matcher import LocationMatcher
from src.services.logging_utils import log_breakdown, log_section, print_with_prefix
from src.services.reference_data import ReferenceData, default_reference_data
from src.services.skill_normalizer import SkillNormalizer


# Soglie minime per ciascuna quality band, dalla più alta
QUALITY_BANDS = (
    (85, MatchQuality.EXCELLENT),
    (70, MatchQuality.VERY_GOOD),
    (60, MatchQuality.GOOD),
    (45, MatchQuality.FAIR),
)

# (cap, nota) nello stesso ordine delle condizioni in MatchingAgent._apply_caps
SAFETY_CAPS = (
    (40, "Score capped due to irrelevant work experience"),
    (35, "Score capped - candidate lacks both relevant experience and skills"),
    (40, "Score capped - no relevant industry experience"),
)


def quality_band(score: int) -> MatchQuality:
    for threshold, band in QUALITY_BANDS:
        if score >= threshold:
            return band
    return MatchQuality.POOR


def recommend(score: int, skills: SkillsScore, career: CareerScore) -> str:
    """Raccomandazione deterministica da score finale, skill e promozione."""
    if score >= 85:
        return "Highly Recommended - Strong match across all criteria. Prioritize for interview."
    if score >= 70:
        return "Recommended - Good match with minor gaps. Worth interviewing."
    if score >= 60:
        if skills.score >= 75:
            return "Consider - Strong skills but gaps elsewhere. May succeed with support."
        return "Consider - Fair match. Assess carefully during interview."
    if score >= 45:
        if career.is_promotion:
            return "Potential - Below threshold but shows growth potential. Consider for development role."
        return "Below Threshold - Significant gaps. Not recommended unless exceptional circumstances."
    return "Not Recommended - Poor match. Unlikely to succeed in this role."


def _has_education(education) -> bool:
    if isinstance(education, list):
        return any(_has_education(item) for item in education)
    if isinstance(education, Education):
        return any((education.degree, education.field, education.institution))
    return bool((education or "").strip())


def missing_candidate_fields(candidate: CandidateProfile) -> List[str]:
    missing = []
    if not candidate.skills:
        missing.append("skills")
    if not candidate.experience:
        missing.append("experience")
    if not _has_education(candidate.education):
        missing.append("education")
    if not (candidate.location or "").strip():
        missing.append("location")
    return missing


class MatchingAgent:
    """
    Calcola il match tra un candidato e una job specification.

    FLUSSO:
    1. Sub-score: title, skills, career, experience, industry, location, education
    2. Media pesata (numpy) → raw score
    3. Penalità di completezza (moltiplicative) → final score
    4. Cap di sicurezza sul final score se la storia lavorativa è irrilevante
    5. Quality band, strengths/gaps/insights, raccomandazione
    """

    def __init__(
        self,
        config: Optional[MatcherConfig] = None,
        reference_data: Optional[ReferenceData] = None,
        skill_normalizer: Optional[SkillNormalizer] = None,
        location_matcher: Optional[LocationMatcher] = None,
        reconciler: Optional[SkillReconciler] = None,
        verbose: bool = False,
    ):
        self.config = config or MatcherConfig()
        self.verbose = verbose

        self._reference_data = reference_data
        self._skill_normalizer = skill_normalizer
        self._location_matcher = location_matcher
        self._reconciler = reconciler

    @property
    def reference_data(self) -> ReferenceData:
        if self._reference_data is None:
            self._reference_data = default_reference_data()
        return self._reference_data

    @property
    def skill_normalizer(self) -> SkillNormalizer:
        if self._skill_normalizer is None:
            self._skill_normalizer = SkillNormalizer(self.reference_data)
        return self._skill_normalizer

    @property
    def location_matcher(self) -> LocationMatcher:
        if self._location_matcher is None:
            self._location_matcher = LocationMatcher(self.reference_data)
        return self._location_matcher

    @property
    def reconciler(self) -> SkillReconciler:
        if self._reconciler is None:
            self._reconciler = build_reconciler(
                self.config.skill_strategy,
                normalizer=self.skill_normalizer,
                reference_data=self.reference_data,
                fuzzy_threshold=self.config.fuzzy_threshold,
            )
        return self._reconciler

    def prepare(self) -> "MatchingAgent":
        """Inizializza subito i servizi lazy (prima di condividere l'agent tra thread)."""
        _ = (self.reconciler, self.location_matcher)
        return self

    def score_breakdown(
        self,
        candidate: CandidateProfile,
        job: JobSpecification,
        current_year: Optional[int] = None,
    ) -> MatchBreakdown:
        """Tutti i sub-score per la coppia; nessuno dipende dagli altri."""
        year = resolve_current_year(current_year if current_year is not None else self.config.current_year)
        experience = candidate.experience
        return MatchBreakdown(
            title=score_title(
                experience, job.title, job.department or job.industry, self.reference_data
            ),
            skills=score_skills(
                candidate.skills,
                experience,
                job.required_skills,
                job.preferred_skills,
                self.reconciler,
                current_year=year,
                full_match_confidence=self.config.full_match_confidence,
                partial_match_confidence=self.config.partial_match_confidence,
            ),
            career=score_career(experience, job.title),
            experience=score_experience(
                experience, job.title, job.min_experience, job.max_experience, year
            ),
            industry=score_industry(
                experience,
                job.industry or job.department,
                job_title=job.title,
                inference_source=self.config.industry_inference_source,
                reference_data=self.reference_data,
            ),
            education=score_education(candidate.education, job.education),
            location=score_location(
                candidate.location,
                job.location,
                job.location_type,
                threshold=self.config.location_threshold,
                matcher=self.location_matcher,
            ),
        )

    def match(
        self,
        candidate: CandidateProfile,
        job: JobSpecification,
        current_year: Optional[int] = None,
    ) -> MatchResult:
        """Calcola il match tra candidato e job."""
        self._log(f"Matching: {candidate.name or candidate.candidate_id or 'Candidato'} vs {job.title or 'Job'}")

        # ═══════════════════════════════════════════════════════════════
        # STEP 1: Sub-score
        # ═══════════════════════════════════════════════════════════════
        log_section(self._log, "Step 1: Sub-score", width=60, char="-")
        breakdown = self.score_breakdown(candidate, job, current_year)
        scores = {name: float(getattr(breakdown, name).score) for name in self.config.weights}
        log_breakdown(self._log, scores, self.config.weights)

        # ═══════════════════════════════════════════════════════════════
        # STEP 2: Media pesata + completezza
        # ═══════════════════════════════════════════════════════════════
        log_section(self._log, "Step 2: Score aggregato", width=60, char="-")
        names = list(self.config.weights)
        weights = np.array([self.config.weights[n] for n in names])
        values = np.array([scores[n] for n in names])
        raw_score = round_half_up(float(np.dot(weights, values)))

        missing = missing_candidate_fields(candidate)
        completeness = 1.0
        for field_name in missing:
            completeness *= self.config.completeness_penalties.get(field_name, 1.0)
        final_score = round_half_up(raw_score * completeness)
        self._log(f"   -> Raw: {raw_score}  completeness: {completeness:.3f}  -> {final_score}")

        # ═══════════════════════════════════════════════════════════════
        # STEP 3: Cap di sicurezza
        # ═══════════════════════════════════════════════════════════════
        final_score, caps_applied = self._apply_caps(final_score, breakdown)
        for note in caps_applied:
            self._log(f"   -> {note}")
        final_score = int(np.clip(final_score, 0, 100))
        self._log(f"SCORE FINALE: {final_score}/100")

        # ═══════════════════════════════════════════════════════════════
        # STEP 4: Spiegazione
        # ═══════════════════════════════════════════════════════════════
        strengths, gaps, insights = self._explain(breakdown, job)
        if missing:
            gaps.append(f"Incomplete CV: missing {', '.join(missing)}")
            insights.append(f"CV completeness: {round_half_up(completeness * 100)}%")
        insights.extend(caps_applied)

        limit = self.config.list_limit
        return MatchResult(
            overall_score=final_score,
            match_quality=quality_band(final_score),
            breakdown=breakdown,
            strengths=strengths[:limit],
            gaps=gaps[:limit],
            insights=insights[:limit],
            recommendation=recommend(final_score, breakdown.skills, breakdown.career),
            raw_score=raw_score,
            completeness=completeness,
            missing_fields=missing,
            caps_applied=caps_applied,
        )

    # ═══════════════════════════════════════════════════════════════════════
    # METODI PRIVATI
    # ═══════════════════════════════════════════════════════════════════════

    def _apply_caps(self, score: int, breakdown: MatchBreakdown) -> Tuple[int, List[str]]:
        """Cap applicati in ordine; ognuno può solo abbassare lo score."""
        title = breakdown.title.score
        conditions = (
            title < 20,
            title < 30 and breakdown.skills.score < 30,
            title < 25 and breakdown.industry.score < 35,
        )
        applied = []
        for triggered, (cap, note) in zip(conditions, SAFETY_CAPS):
            if triggered and score > cap:
                score = cap
                applied.append(note)
        return score, applied

    def _explain(self, breakdown: MatchBreakdown, job: JobSpecification):
        """Strengths, gaps e insights dalle soglie di ciascun sub-score."""
        strengths: List[str] = []
        gaps: List[str] = []
        insights: List[str] = []

        title = breakdown.title
        if title.score > 70:
            strengths.append(f"Relevant role experience: {title.reason}")
        elif title.score < 30:
            gaps.append(f'No relevant experience for "{job.title or "this"}" role')

        skills = breakdown.skills
        if skills.score > 80:
            strengths.append(f"Excellent skills match: {', '.join(skills.top_matches[:3])}")
        elif skills.score > 60:
            strengths.append(f"Good skills match with {len(skills.matched_required)} required skills")
        elif skills.missing_required:
            gaps.append(
                f"Missing {len(skills.missing_required)} required skills: "
                f"{', '.join(skills.missing_required[:3])}"
            )
        if skills.has_recent_experience:
            insights.append("Recent hands-on experience with key technologies")
        if skills.related_skills:
            insights.append(f"Has {len(skills.related_skills)} related skills that could transfer well")

        career = breakdown.career
        if career.score > 80:
            strengths.append(career.reason)
        elif career.score < 50:
            gaps.append(career.reason)
        if career.is_promotion:
            insights.append("This role represents a natural career progression")
        if career.overqualified:
            insights.append("Candidate may be overqualified - assess retention risk")

        experience = breakdown.experience
        if experience.score == 100:
            strengths.append(f"Perfect experience match: {experience.total_years} years")
        elif experience.score < 50:
            gaps.append(experience.reason)

        industry = breakdown.industry
        if industry.score > 70:
            aligned = ', '.join(industry.matched_industries) or industry.target_industry
            strengths.append(f"Strong industry alignment: {aligned}")
        elif industry.score < 40:
            gaps.append("Limited experience in target industry")

        return strengths, gaps, insights

    def _log(self, message: str) -> None:
        print_with_prefix("[MatchingAgent]", message, enabled=self.verbose)
