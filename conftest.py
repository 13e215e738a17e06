"""
Fixture condivise dai test.
Tutti i test fissano l'anno corrente a 2025 per avere durate deterministiche.
"""

import json
from pathlib import Path

import pytest

from src.agents.matching_agent import MatchingAgent
from src.config import MatcherConfig
from src.models.candidate import CandidateProfile
from src.models.job import JobSpecification
from src.services.reference_data import default_reference_data
from src.services.skill_normalizer import SkillNormalizer


CURRENT_YEAR = 2025
DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(scope="session")
def refs():
    return default_reference_data()


@pytest.fixture(scope="session")
def normalizer(refs):
    return SkillNormalizer(refs)


@pytest.fixture
def config():
    return MatcherConfig(current_year=CURRENT_YEAR)


@pytest.fixture
def agent(config, refs):
    return MatchingAgent(config=config, reference_data=refs)


@pytest.fixture
def sample_job():
    with open(DATA_DIR / "jobs" / "software_developer.json", encoding="utf-8") as f:
        return JobSpecification.model_validate(json.load(f))


@pytest.fixture
def sample_candidates():
    candidates = {}
    for path in sorted((DATA_DIR / "candidates").glob("*.json")):
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        data.setdefault("candidate_id", path.stem)
        candidates[path.stem] = CandidateProfile.model_validate(data)
    return candidates
