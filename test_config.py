"""
Test Config
"""

import pytest

from src.config import DEFAULT_WEIGHTS, MatcherConfig, MatcherConfigError


def test_defaults_are_valid():
    config = MatcherConfig()
    assert config.weights == DEFAULT_WEIGHTS
    assert sum(config.weights.values()) == pytest.approx(1.0)
    assert config.skill_strategy == "semantic"


@pytest.mark.parametrize("overrides", [
    {"weights": {**DEFAULT_WEIGHTS, "title": 0.5}},
    {"weights": {"title": 1.0}},
    {"weights": {**DEFAULT_WEIGHTS, "title": -0.1, "skills": 0.6}},
    {"completeness_penalties": {"hobbies": 0.5}},
    {"completeness_penalties": {"skills": 1.5}},
    {"skill_strategy": "llm"},
    {"industry_inference_source": "company"},
    {"partial_match_confidence": 80, "full_match_confidence": 70},
    {"list_limit": -1},
    {"max_workers": 0},
])
def test_invalid_config_is_rejected(overrides):
    with pytest.raises(MatcherConfigError):
        MatcherConfig(**overrides)


def test_with_overrides_revalidates():
    config = MatcherConfig()
    assert config.with_overrides(skill_strategy="fuzzy").skill_strategy == "fuzzy"
    assert config.skill_strategy == "semantic"
    with pytest.raises(MatcherConfigError):
        config.with_overrides(skill_strategy="nope")


def test_from_env(monkeypatch):
    monkeypatch.setenv("CVMATCH_WEIGHTS", "title:0.20,skills:0.30")
    monkeypatch.setenv("CVMATCH_SKILL_STRATEGY", " Fuzzy ")
    monkeypatch.setenv("CVMATCH_CURRENT_YEAR", "2025")
    monkeypatch.setenv("CVMATCH_MAX_WORKERS", "8")
    config = MatcherConfig.from_env()
    assert config.weights["title"] == 0.20
    assert config.weights["skills"] == 0.30
    assert config.weights["career"] == DEFAULT_WEIGHTS["career"]
    assert config.skill_strategy == "fuzzy"
    assert config.current_year == 2025
    assert config.max_workers == 8


def test_from_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("CVMATCH_LIST_LIMIT", "many")
    with pytest.raises(MatcherConfigError):
        MatcherConfig.from_env()


def test_from_env_rejects_malformed_weights(monkeypatch):
    monkeypatch.setenv("CVMATCH_WEIGHTS", "title=0.3")
    with pytest.raises(MatcherConfigError):
        MatcherConfig.from_env()


def test_config_error_is_value_error():
    assert issubclass(MatcherConfigError, ValueError)
