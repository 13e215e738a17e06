"""
Matching Orchestrator
Coordina il matching di una job specification contro N candidati.

Responsabilità:
- Inizializza un unico MatchingAgent condiviso (tabelle di riferimento read-only)
- Distribuisce i match su un pool di thread (ogni match è indipendente)
- Isola gli errori del singolo candidato senza fermare il batch
- Scarta i risultati oltre il timeout, se impostato
"""

import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError, as_completed
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from src.agents.matching_agent import MatchingAgent
from src.config import MatcherConfig
from src.models.candidate import CandidateProfile
from src.models.job import JobSpecification
from src.models.match_result import MatchResult
from src.services.date_ranges import resolve_current_year
from src.services.logging_utils import log_section, print_with_prefix


CandidateInput = Union[CandidateProfile, Dict[str, Any]]
JobInput = Union[JobSpecification, Dict[str, Any]]


@dataclass
class CandidateMatch:
    """Risultato del match di un candidato all'interno di un batch."""
    candidate_id: str
    result: Optional[MatchResult] = None
    elapsed_ms: int = 0
    error: str = ""

    @property
    def score(self) -> int:
        return self.result.overall_score if self.result is not None else 0


def _as_candidate(candidate: CandidateInput) -> CandidateProfile:
    if isinstance(candidate, CandidateProfile):
        return candidate
    return CandidateProfile.model_validate(candidate)


def _as_job(job: JobInput) -> JobSpecification:
    if isinstance(job, JobSpecification):
        return job
    return JobSpecification.model_validate(job)


def rank(matches: Sequence[CandidateMatch]) -> List[CandidateMatch]:
    """Match riusciti per score decrescente (a parità, ordine di input), poi gli errori."""
    ok = [m for m in matches if m.result is not None]
    failed = [m for m in matches if m.result is None]
    return sorted(ok, key=lambda m: -m.score) + failed


class MatchingOrchestrator:
    """
    Orchestratore del batch matching.

    FLUSSO:
    1. Normalizza job e candidati nei modelli pydantic
    2. Fissa l'anno corrente una sola volta per tutto il batch
    3. Sottomette un match per candidato al ThreadPoolExecutor
    4. Raccoglie i risultati (in ordine di input) con eventuale timeout
    """

    def __init__(
        self,
        config: Optional[MatcherConfig] = None,
        matching_agent: Optional[MatchingAgent] = None,
        max_workers: Optional[int] = None,
        verbose: bool = False,
    ):
        self.config = config or MatcherConfig()
        self.max_workers = max_workers or self.config.max_workers
        self.verbose = verbose

        self._matching_agent = matching_agent

    @property
    def matching_agent(self) -> MatchingAgent:
        if self._matching_agent is None:
            # Agent interno sempre silenzioso: i log concorrenti si mescolerebbero
            self._matching_agent = MatchingAgent(config=self.config, verbose=False)
        return self._matching_agent

    def match(
        self,
        candidate: CandidateInput,
        job: JobInput,
        current_year: Optional[int] = None,
    ) -> MatchResult:
        """Match singolo (sincrono)."""
        return self.matching_agent.match(_as_candidate(candidate), _as_job(job), current_year)

    def match_batch(
        self,
        job: JobInput,
        candidates: Sequence[CandidateInput],
        timeout: Optional[float] = None,
        current_year: Optional[int] = None,
    ) -> List[CandidateMatch]:
        """
        Esegue il matching di una job contro tutti i candidati.

        Args:
            job: Job specification (modello o dict)
            candidates: Profili candidato (modelli o dict)
            timeout: Secondi massimi per l'intero batch; i risultati non pronti vengono scartati
            current_year: Anno di riferimento per le durate (default: config o anno corrente)

        Returns:
            Lista di CandidateMatch nell'ordine dei candidati in input
        """
        job_spec = _as_job(job)
        year = resolve_current_year(current_year if current_year is not None else self.config.current_year)

        log_section(self._log, "MATCHING ORCHESTRATOR: Batch", width=70, char="=")
        self._log(f"Job: {job_spec.title or '-'}  |  Candidati: {len(candidates)}  |  Workers: {self.max_workers}")

        self.matching_agent.prepare()
        slots: List[Optional[CandidateMatch]] = [None] * len(candidates)
        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            futures = {
                executor.submit(self._match_one, index, candidate, job_spec, year): index
                for index, candidate in enumerate(candidates)
            }
            try:
                for future in as_completed(futures, timeout=timeout):
                    slots[futures[future]] = future.result()
            except FuturesTimeoutError:
                discarded = sum(1 for slot in slots if slot is None)
                self._log(f"Timeout dopo {timeout}s: {discarded} risultati scartati")
        finally:
            executor.shutdown(wait=timeout is None, cancel_futures=True)

        matches = [slot for slot in slots if slot is not None]
        n_errors = sum(1 for m in matches if m.error)
        self._log(f"Completati: {len(matches) - n_errors} OK, {n_errors} errori")
        return matches

    # ═══════════════════════════════════════════════════════════════════════
    # METODI PRIVATI
    # ═══════════════════════════════════════════════════════════════════════

    def _match_one(self, index: int, candidate: CandidateInput, job: JobSpecification, year: int) -> CandidateMatch:
        started = time.perf_counter()
        candidate_id = self._candidate_id(index, candidate)
        try:
            result = self.matching_agent.match(_as_candidate(candidate), job, current_year=year)
            match = CandidateMatch(candidate_id=candidate_id, result=result)
        except Exception as e:
            match = CandidateMatch(candidate_id=candidate_id, error=f"{type(e).__name__}: {e}")
        match.elapsed_ms = int((time.perf_counter() - started) * 1000)
        if match.error:
            self._log(f"  [{index + 1}] ERRORE {candidate_id}: {match.error}")
        else:
            self._log(f"  [{index + 1}] OK {candidate_id} -> score={match.score}")
        return match

    @staticmethod
    def _candidate_id(index: int, candidate: CandidateInput) -> str:
        if isinstance(candidate, CandidateProfile):
            return candidate.candidate_id or candidate.name or f"candidate-{index + 1}"
        if isinstance(candidate, dict):
            for key in ("candidate_id", "candidateId", "id", "name"):
                if candidate.get(key):
                    return str(candidate[key])
        return f"candidate-{index + 1}"

    def _log(self, message: str) -> None:
        print_with_prefix("[Orchestrator]", message, enabled=self.verbose)


def match_candidate_to_job(
    candidate: CandidateInput,
    job: JobInput,
    current_year: Optional[int] = None,
    verbose: bool = False,
    **config_overrides,
) -> MatchResult:
    """
    Funzione di convenienza per un singolo match.

    Args:
        candidate: Profilo candidato (modello o dict, anche camelCase)
        job: Job specification (modello o dict, anche camelCase)
        current_year: Anno di riferimento per le durate
        verbose: Se True, logga i passaggi del MatchingAgent
        **config_overrides: Campi di MatcherConfig da sovrascrivere (es. skill_strategy="fuzzy")

    Returns:
        MatchResult immutabile
    """
    config = MatcherConfig(**config_overrides)
    agent = MatchingAgent(config=config, verbose=verbose)
    return agent.match(_as_candidate(candidate), _as_job(job), current_year)
