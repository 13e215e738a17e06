# agents package
"""Score composer for the CV-to-job matching engine."""

from src.agents.matching_agent import MatchingAgent, quality_band, recommend

__all__ = [
    "MatchingAgent",
    "quality_band",
    "recommend",
]
