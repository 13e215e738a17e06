"""
Test Career Progression
"""

import pytest

from src.models.candidate import WorkEntry
from src.scorers.career import score_career, seniority_level


@pytest.mark.parametrize("title, level", [
    ("Junior Developer", 1),
    ("Engineer", 3),
    ("Senior Engineer", 4),
    ("Lead Engineer", 5),
    ("Team Leader", 5),
    ("Shift Leader", 5),
    ("Engineering Manager", 5),
    ("Principal Engineer", 6),
    ("Director of Engineering", 7),
    ("Head Chef", 7),
    ("VP Sales", 8),
    ("Chief Financial Officer", 9),
    ("CEO", 10),
    (None, 3),
])
def test_seniority_level(title, level):
    assert seniority_level(title) == level


def test_keywords_need_word_boundaries():
    # "director" contiene "cto", "leadership" contiene "lead"
    assert seniority_level("Director") == 7
    assert seniority_level("Leadership Coach") == 3


def test_natural_promotion():
    result = score_career([WorkEntry(title="Senior Engineer")], "Lead Engineer")
    assert result.score == 95
    assert result.is_promotion
    assert (result.current_level, result.target_level) == (4, 5)


@pytest.mark.parametrize("current, target, score, reason", [
    ("Senior Engineer", "Senior Developer", 90, "Lateral move - matching seniority level"),
    ("Senior Developer", "Principal Developer", 75, "Stretch role - significant step up"),
    ("Director", "Senior Engineer", 60, "Overqualified - may have retention concerns"),
    ("Junior Developer", "Director", 40, "Under-experienced for target seniority"),
    ("Senior Engineer", "Engineer", 70, "Standard career fit"),
])
def test_progression_rules(current, target, score, reason):
    result = score_career([WorkEntry(title=current)], target)
    assert result.score == score
    assert result.reason == reason


def test_overqualified_flag():
    result = score_career([WorkEntry(title="Director")], "Senior Engineer")
    assert result.overqualified
    assert not result.is_promotion


def test_uses_most_recent_role_only():
    experience = [WorkEntry(title="Engineer"), WorkEntry(title="CEO")]
    assert score_career(experience, "Senior Engineer").score == 95


def test_missing_inputs():
    assert score_career([], "Engineer").score == 50
    no_target = score_career([WorkEntry(title="Engineer")], "")
    assert no_target.score == 70
    assert no_target.reason == "Target role not specified - standard career fit assumed"
