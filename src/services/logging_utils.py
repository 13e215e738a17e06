"""Helper di logging su console per agenti e orchestratore (attivi solo in verbose)."""

from typing import Callable, Mapping, Optional


LogFn = Callable[[str], None]


def print_with_prefix(prefix: str, message: Optional[str], enabled: bool = True) -> None:
    """Stampa ogni riga del messaggio preceduta dal prefisso del componente."""
    if not enabled:
        return
    for line in ("" if message is None else str(message)).splitlines() or [""]:
        print(f"{prefix} {line}".rstrip())


def log_section(log_fn: LogFn, title: str, width: int = 70, char: str = "=") -> None:
    rule = char * width
    for line in (rule, title, rule):
        log_fn(line)


def log_breakdown(log_fn: LogFn, scores: Mapping[str, float], weights: Mapping[str, float]) -> None:
    """Una riga per sub-score: valore, peso e contributo allo score pesato."""
    for name, score in scores.items():
        weight = weights.get(name, 0.0)
        log_fn(f"   {name:<11} {score:>5.0f}  x {weight:.2f} = {score * weight:6.2f}")
