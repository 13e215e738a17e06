"""
Test Skills Scorer
Entrambe le strategie di riconciliazione, proficiency e aggregazione.
"""

import pytest

from src.models.candidate import WorkEntry
from src.models.skill import MatchKind, ProficiencyLevel
from src.scorers.skills import (
    FuzzySkillReconciler,
    SemanticSkillReconciler,
    build_reconciler,
    detect_proficiency,
    extract_recent_skills,
    score_skills,
)


@pytest.fixture
def semantic(normalizer, refs):
    return SemanticSkillReconciler(normalizer, refs)


@pytest.fixture
def fuzzy(normalizer):
    return FuzzySkillReconciler(normalizer)


# ═══════════════════════════════════════════════════════════════════════════
# RECONCILERS
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("cv_skill, required, confidence, kind", [
    ("reactjs", "React", 100, MatchKind.EXACT),
    ("React", "JavaScript", 85, MatchKind.IMPLIES),
    ("Vue", "React", 75, MatchKind.TRANSFERABLE),
    ("C#", "Python", 60, MatchKind.RELATED),
    ("HTML", "React", 40, MatchKind.FOUNDATIONAL),
])
def test_semantic_hierarchy(semantic, cv_skill, required, confidence, kind):
    match = semantic.skill_matches([cv_skill], required)
    assert match.matched
    assert match.confidence == confidence
    assert match.kind == kind


def test_semantic_no_match(semantic):
    match = semantic.skill_matches(["Cooking"], "Python")
    assert not match.matched
    assert match.kind == MatchKind.NONE
    assert match.confidence == 0


def test_semantic_prefers_strongest_phase(semantic):
    # HTML sarebbe foundational, ma React implica JavaScript
    match = semantic.skill_matches(["HTML", "React"], "JavaScript")
    assert match.kind == MatchKind.IMPLIES
    assert match.candidate_skill == "React"


def test_fuzzy_reconciler(fuzzy):
    assert fuzzy.skill_matches(["reactjs"], "React").kind == MatchKind.EXACT
    assert fuzzy.skill_matches(["Kubernets"], "k8s").kind == MatchKind.FUZZY
    assert fuzzy.skill_matches(["Kubernets"], "k8s").confidence == 100
    assert not fuzzy.skill_matches(["Cooking"], "Python").matched


def test_fuzzy_containment_counts_as_match(fuzzy):
    # "java" è contenuto in "javascript": similarità 90
    assert fuzzy.skill_matches(["JavaScript"], "Java").matched


def test_build_reconciler(normalizer, refs):
    assert build_reconciler("fuzzy", normalizer, refs).name == "fuzzy"
    assert build_reconciler("semantic", normalizer, refs).name == "semantic"
    with pytest.raises(ValueError):
        build_reconciler("magic", normalizer, refs)


# ═══════════════════════════════════════════════════════════════════════════
# PROFICIENCY
# ═══════════════════════════════════════════════════════════════════════════

def test_proficiency_levels():
    old = WorkEntry(title="Dev", description="python scripts", duration="2010 - 2011")
    older = WorkEntry(title="Dev", description="python tools", duration="2012 - 2013")
    long_run = WorkEntry(title="Dev", description="python services", duration="2015 - 2021")
    led = WorkEntry(title="Dev", description="Led the Python platform team", duration="2010")

    assert detect_proficiency("Python", [], 2025).level == ProficiencyLevel.UNKNOWN
    assert detect_proficiency("Python", [old], 2025).level == ProficiencyLevel.BEGINNER
    assert detect_proficiency("Python", [old, older], 2025).level == ProficiencyLevel.INTERMEDIATE
    assert detect_proficiency("Python", [long_run], 2025).level == ProficiencyLevel.EXPERT

    expert = detect_proficiency("Python", [led], 2025)
    assert expert.level == ProficiencyLevel.EXPERT
    assert expert.indicators == ["led"]
    assert expert.multiplier == 1.0


def test_recent_mention_is_intermediate():
    entry = WorkEntry(title="Dev", description="python scripts", duration="2024")
    proficiency = detect_proficiency("Python", [entry], 2025)
    assert proficiency.recent
    assert proficiency.level == ProficiencyLevel.INTERMEDIATE


def test_short_skill_needs_word_boundary():
    entry = WorkEntry(title="Dev", description="worked on a great product", duration="2024")
    assert detect_proficiency("R", [entry], 2025).mentions == 0


def test_extract_recent_skills():
    experience = [
        WorkEntry(title="Engineer", description="Building React and Docker services", duration="2022 - Present"),
        WorkEntry(title="Engineer", description="Angular apps", duration="2018 - 2022"),
    ]
    assert extract_recent_skills(experience) == ["Docker", "React"]


# ═══════════════════════════════════════════════════════════════════════════
# AGGREGATION
# ═══════════════════════════════════════════════════════════════════════════

def test_no_cv_skills_scores_ten(semantic):
    result = score_skills([], [], ["React", "SQL"], [], semantic, 2025)
    assert result.score == 10
    assert result.reason == "No skills listed on CV"
    assert result.missing_required == ["React", "SQL"]


def test_single_required_skill_matched(semantic):
    experience = [WorkEntry(title="Software Engineer")]
    result = score_skills(["React", "Node.js"], experience, ["React"], [], semantic, 2025)
    # 1.0 * 0.7 (proficiency sconosciuta) * 80 + 5
    assert result.score == 61
    assert result.matched_required == ["React"]
    assert result.total_required == 1
    assert result.reason == "1/1 required skills matched"


def test_expert_usage_gets_full_credit(semantic):
    experience = [WorkEntry(title="Frontend Lead", description="Led the React migration", duration="2018 - Present")]
    result = score_skills(["React"], experience, ["React"], [], semantic, 2025)
    assert result.score == 85
    assert result.proficiencies["React"].level == ProficiencyLevel.EXPERT
    assert result.has_recent_experience
    assert result.recent_skills == ["React"]


def test_partial_credit(semantic):
    result = score_skills(["HTML"], [], ["React"], [], semantic, 2025)
    # 0.40 * 0.7 * 80 + 5 = 27.4
    assert result.score == 27
    assert result.partial_required == ["React"]
    assert result.matched_required == []
    assert result.reason == "0/1 required skills matched (1 partially)"


def test_preferred_skills(semantic):
    result = score_skills(["React", "Docker"], [], ["React"], ["Docker", "AWS"], semantic, 2025)
    # 56 + 0.7 / 2 * 20
    assert result.score == 63
    assert result.matched_preferred == ["Docker"]
    assert result.total_preferred == 2


def test_no_requirements_uses_skill_count(semantic):
    three = score_skills(["A1", "B2", "C3"], [], [], [], semantic, 2025)
    five = score_skills(["A1", "B2", "C3", "D4", "E5"], [], [], [], semantic, 2025)
    assert three.score == 55
    assert five.score == 60
    assert three.reason == "No required skills specified"


def test_related_skills_for_missing(fuzzy):
    result = score_skills(["Vue", "Angular"], [], ["React"], [], fuzzy, 2025)
    assert result.missing_required == ["React"]
    assert result.related_skills == ["Vue", "Angular"]
    assert result.score == 5
    assert result.strategy == "fuzzy"


@pytest.mark.parametrize("strategy", ["fuzzy", "semantic"])
def test_adding_candidate_skills_never_lowers_score(normalizer, refs, strategy):
    reconciler = build_reconciler(strategy, normalizer, refs)
    required = ["React", "Node.js", "SQL", "Docker"]
    preferred = ["AWS"]
    pool = ["HTML", "React", "Vue", "PostgreSQL", "Docker", "SQL", "AWS", "Node.js", "Cooking"]

    previous = 0
    skills = []
    for skill in pool:
        skills.append(skill)
        score = score_skills(skills, [], required, preferred, reconciler, 2025).score
        assert score >= previous
        previous = score


def test_scores_stay_in_bounds(semantic):
    many = ["React", "Node.js", "JavaScript", "SQL", "Docker", "AWS", "Python"]
    result = score_skills(many, [], many, many, semantic, 2025)
    assert 0 <= result.score <= 100
