"""
Configurazione del motore di matching.

Tutti i parametri hanno default sensati; `MatcherConfig.from_env()` permette di
sovrascriverli con variabili d'ambiente CVMATCH_* (caricate da .env nel CLI).
"""

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Optional


class MatcherConfigError(ValueError):
    """Configurazione non valida (pesi, strategia, soglie)."""
    pass


SKILL_STRATEGIES = ("fuzzy", "semantic")
INDUSTRY_INFERENCE_SOURCES = ("candidate", "job")

DEFAULT_WEIGHTS = {
    "title": 0.25,
    "skills": 0.25,
    "career": 0.15,
    "experience": 0.15,
    "industry": 0.10,
    "education": 0.05,
    "location": 0.05,
}

# Moltiplicatori applicati quando il CV non ha il campo
DEFAULT_COMPLETENESS_PENALTIES = {
    "skills": 0.85,
    "experience": 0.80,
    "education": 0.90,
    "location": 0.92,
}


def _parse_mapping(raw: str) -> Dict[str, float]:
    """"title:0.3,skills:0.2" → {"title": 0.3, "skills": 0.2}"""
    out: Dict[str, float] = {}
    for item in raw.split(","):
        if not item.strip():
            continue
        key, sep, value = item.partition(":")
        if not sep:
            raise MatcherConfigError(f"Voce non valida '{item.strip()}': atteso nome:valore")
        try:
            out[key.strip().lower()] = float(value)
        except ValueError:
            raise MatcherConfigError(f"Valore non numerico per '{key.strip()}': {value!r}")
    return out


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise MatcherConfigError(f"{name} deve essere un intero, trovato {raw!r}")


@dataclass
class MatcherConfig:
    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    completeness_penalties: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_COMPLETENESS_PENALTIES)
    )
    skill_strategy: str = "semantic"            # "fuzzy" o "semantic"
    fuzzy_threshold: int = 85
    full_match_confidence: int = 70
    partial_match_confidence: int = 40
    location_threshold: int = 85
    list_limit: int = 5                         # max voci per strengths/gaps/insights
    industry_inference_source: str = "candidate"
    current_year: Optional[int] = None          # None = anno corrente a ogni match
    max_workers: int = 4

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if set(self.weights) != set(DEFAULT_WEIGHTS):
            raise MatcherConfigError(
                f"I pesi devono coprire esattamente: {', '.join(DEFAULT_WEIGHTS)}"
            )
        for name, weight in self.weights.items():
            if not 0.0 <= weight <= 1.0:
                raise MatcherConfigError(f"Peso '{name}' fuori da [0, 1]: {weight}")
        total = sum(self.weights.values())
        if abs(total - 1.0) > 1e-6:
            raise MatcherConfigError(f"La somma dei pesi deve essere 1.0 (trovato {total:.4f})")

        unknown = set(self.completeness_penalties) - set(DEFAULT_COMPLETENESS_PENALTIES)
        if unknown:
            raise MatcherConfigError(f"Penalità sconosciute: {', '.join(sorted(unknown))}")
        for name, factor in self.completeness_penalties.items():
            if not 0.0 <= factor <= 1.0:
                raise MatcherConfigError(f"Penalità '{name}' fuori da [0, 1]: {factor}")

        if self.skill_strategy not in SKILL_STRATEGIES:
            raise MatcherConfigError(
                f"skill_strategy deve essere uno tra {SKILL_STRATEGIES}, trovato '{self.skill_strategy}'"
            )
        if self.industry_inference_source not in INDUSTRY_INFERENCE_SOURCES:
            raise MatcherConfigError(
                f"industry_inference_source deve essere uno tra {INDUSTRY_INFERENCE_SOURCES}"
            )
        if not 0 <= self.partial_match_confidence <= self.full_match_confidence <= 100:
            raise MatcherConfigError("Soglie di confidenza: 0 <= partial <= full <= 100")
        if self.list_limit < 0 or self.max_workers < 1:
            raise MatcherConfigError("list_limit deve essere >= 0 e max_workers >= 1")

    def with_overrides(self, **overrides) -> "MatcherConfig":
        """Copia validata con alcuni campi sostituiti."""
        return replace(self, **overrides)

    @classmethod
    def from_env(cls) -> "MatcherConfig":
        """Legge la configurazione dalle variabili d'ambiente CVMATCH_*."""
        kwargs = {}
        weights = os.getenv("CVMATCH_WEIGHTS")
        if weights:
            kwargs["weights"] = {**DEFAULT_WEIGHTS, **_parse_mapping(weights)}
        penalties = os.getenv("CVMATCH_COMPLETENESS_PENALTIES")
        if penalties:
            kwargs["completeness_penalties"] = {
                **DEFAULT_COMPLETENESS_PENALTIES, **_parse_mapping(penalties)
            }
        strategy = os.getenv("CVMATCH_SKILL_STRATEGY")
        if strategy:
            kwargs["skill_strategy"] = strategy.strip().lower()
        source = os.getenv("CVMATCH_INDUSTRY_INFERENCE")
        if source:
            kwargs["industry_inference_source"] = source.strip().lower()
        for env_name, attr in (
            ("CVMATCH_FUZZY_THRESHOLD", "fuzzy_threshold"),
            ("CVMATCH_LOCATION_THRESHOLD", "location_threshold"),
            ("CVMATCH_LIST_LIMIT", "list_limit"),
            ("CVMATCH_CURRENT_YEAR", "current_year"),
            ("CVMATCH_MAX_WORKERS", "max_workers"),
        ):
            value = _env_int(env_name)
            if value is not None:
                kwargs[attr] = value
        return cls(**kwargs)
