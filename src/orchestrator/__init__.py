# orchestrator package
"""Batch matching of one job specification against many candidates."""

from src.orchestrator.matching_orchestrator import (
    MatchingOrchestrator,
    CandidateMatch,
    rank,
    match_candidate_to_job
)

__all__ = [
    "MatchingOrchestrator",
    "CandidateMatch",
    "rank",
    "match_candidate_to_job",
]
