"""
Test Matching Agent
Composizione dello score finale: pesi, completezza, cap di sicurezza, spiegazione.
"""

import pytest

from src.agents.matching_agent import MatchingAgent, SAFETY_CAPS, quality_band, recommend
from src.config import MatcherConfig
from src.models.candidate import CandidateProfile
from src.models.job import JobSpecification
from src.models.match_result import (
    CareerScore,
    EducationScore,
    ExperienceScore,
    IndustryScore,
    LocationScore,
    MatchBreakdown,
    MatchQuality,
    SkillsScore,
    TitleScore,
)


def _candidate(title, skills, **extra):
    data = {
        "name": "Test Candidate",
        "skills": skills,
        "experience": [{"title": title}],
        "education": "BSc Computer Science",
        "location": "Cape Town",
    }
    data.update(extra)
    return CandidateProfile.model_validate(data)


@pytest.fixture
def developer_job():
    return JobSpecification.model_validate({
        "title": "Software Developer",
        "requiredSkills": ["React"],
    })


# ═══════════════════════════════════════════════════════════════════════════
# END-TO-END
# ═══════════════════════════════════════════════════════════════════════════

def test_relevant_candidate(agent, developer_job):
    result = agent.match(_candidate("Software Engineer", ["React", "Node.js"]), developer_job)
    assert result.breakdown.title.score >= 90
    assert result.breakdown.skills.matched_required == ["React"]
    assert result.breakdown.skills.total_required == 1
    assert result.caps_applied == []
    assert result.missing_fields == []


def test_irrelevant_experience_is_capped(agent, developer_job):
    candidate = _candidate("Chef", ["React", "Node.js", "JavaScript", "SQL"])
    job = developer_job.model_copy(update={"required_skills": ["React", "Node.js", "JavaScript", "SQL"]})
    result = agent.match(candidate, job)
    assert result.breakdown.title.score <= 15
    assert result.raw_score > 40
    assert result.overall_score == 40
    assert result.caps_applied == [SAFETY_CAPS[0][1]]
    assert SAFETY_CAPS[0][1] in result.insights


def test_no_relevant_experience_nor_skills(agent, developer_job):
    result = agent.match(_candidate("Chef", ["Cooking"]), developer_job)
    assert result.overall_score <= 35
    assert SAFETY_CAPS[1][1] in result.caps_applied


def _breakdown(title, skills, industry):
    return MatchBreakdown(
        title=TitleScore(score=title, reason=""),
        skills=SkillsScore(score=skills, reason=""),
        career=CareerScore(score=70, reason=""),
        experience=ExperienceScore(score=70, reason=""),
        industry=IndustryScore(score=industry, reason=""),
        education=EducationScore(score=70, reason=""),
        location=LocationScore(score=70, reason=""),
    )


@pytest.mark.parametrize("title, skills, industry, score, capped, notes", [
    (22, 50, 10, 60, 40, [SAFETY_CAPS[2][1]]),
    (22, 50, 10, 30, 30, []),
    (22, 50, 40, 60, 60, []),
    (10, 20, 10, 60, 35, [SAFETY_CAPS[0][1], SAFETY_CAPS[1][1]]),
])
def test_apply_caps_in_order(agent, title, skills, industry, score, capped, notes):
    assert agent._apply_caps(score, _breakdown(title, skills, industry)) == (capped, notes)


def test_empty_candidate_gets_completeness_penalty(agent, developer_job):
    result = agent.match(CandidateProfile(), developer_job)
    assert result.missing_fields == ["skills", "experience", "education", "location"]
    assert result.completeness == pytest.approx(0.85 * 0.80 * 0.90 * 0.92)
    assert result.breakdown.skills.score == 10
    assert 0 <= result.overall_score <= result.raw_score
    assert any(gap.startswith("Incomplete CV") for gap in result.gaps)


def test_deterministic(agent, developer_job):
    candidate = _candidate("Data Scientist", ["Python", "React"])
    assert agent.match(candidate, developer_job) == agent.match(candidate, developer_job)


def test_all_scores_in_bounds(agent, sample_job, sample_candidates):
    for candidate in sample_candidates.values():
        result = agent.match(candidate, sample_job)
        assert 0 <= result.overall_score <= 100
        for name in MatcherConfig().weights:
            assert 0 <= getattr(result.breakdown, name).score <= 100


def test_sample_ranking(agent, sample_job, sample_candidates):
    scores = {cid: agent.match(c, sample_job).overall_score for cid, c in sample_candidates.items()}
    assert scores["alice_engineer"] > scores["chen_analyst"] > scores["bruno_chef"]
    assert scores["bruno_chef"] <= 40


def test_custom_weights(refs, developer_job):
    weights = {name: 0.0 for name in MatcherConfig().weights}
    weights["skills"] = 1.0
    agent = MatchingAgent(config=MatcherConfig(weights=weights, current_year=2025), reference_data=refs)
    result = agent.match(_candidate("Software Engineer", ["React", "Node.js"]), developer_job)
    assert result.overall_score == result.breakdown.skills.score == 61


def test_strategy_and_list_limit(refs, developer_job):
    config = MatcherConfig(skill_strategy="fuzzy", list_limit=1, current_year=2025)
    agent = MatchingAgent(config=config, reference_data=refs)
    result = agent.match(CandidateProfile(), developer_job)
    assert result.breakdown.skills.strategy == "fuzzy"
    assert len(result.gaps) <= 1
    assert len(result.insights) <= 1


def test_verbose_logging(refs, developer_job, capsys):
    agent = MatchingAgent(config=MatcherConfig(current_year=2025), reference_data=refs, verbose=True)
    agent.match(_candidate("Software Engineer", ["React"]), developer_job)
    out = capsys.readouterr().out
    assert "[MatchingAgent]" in out
    assert "SCORE FINALE" in out


def test_silent_by_default(agent, developer_job, capsys):
    agent.match(_candidate("Software Engineer", ["React"]), developer_job)
    assert capsys.readouterr().out == ""


# ═══════════════════════════════════════════════════════════════════════════
# BANDS & RECOMMENDATION
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("score, band", [
    (100, MatchQuality.EXCELLENT),
    (85, MatchQuality.EXCELLENT),
    (84, MatchQuality.VERY_GOOD),
    (70, MatchQuality.VERY_GOOD),
    (69, MatchQuality.GOOD),
    (60, MatchQuality.GOOD),
    (59, MatchQuality.FAIR),
    (45, MatchQuality.FAIR),
    (44, MatchQuality.POOR),
    (0, MatchQuality.POOR),
])
def test_quality_band(score, band):
    assert quality_band(score) == band


def test_recommendation_text():
    skills = SkillsScore(score=80, reason="")
    weak_skills = SkillsScore(score=50, reason="")
    career = CareerScore(score=70, reason="")
    promotion = CareerScore(score=95, reason="", is_promotion=True)

    assert recommend(90, skills, career).startswith("Highly Recommended")
    assert recommend(72, skills, career).startswith("Recommended")
    assert recommend(62, skills, career).startswith("Consider - Strong skills")
    assert recommend(62, weak_skills, career).startswith("Consider - Fair match")
    assert recommend(50, skills, promotion).startswith("Potential")
    assert recommend(50, skills, career).startswith("Below Threshold")
    assert recommend(30, skills, promotion).startswith("Not Recommended")
