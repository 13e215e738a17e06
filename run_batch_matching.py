import argparse
import csv
import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

from src.config import MatcherConfig, MatcherConfigError
from src.models.job import JobSpecification
from src.models.match_result import MatchQuality
from src.orchestrator import MatchingOrchestrator, rank


SUB_SCORES = ("title", "skills", "career", "experience", "industry", "education", "location")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json_dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8", errors="replace"))


def _iter_files(directory: Path, extensions: Tuple[str, ...]) -> List[Path]:
    paths: List[Path] = []
    for ext in extensions:
        paths.extend(directory.glob(f"*{ext}"))
    return sorted({p.resolve() for p in paths})


def _load_candidates(paths: List[Path]) -> Tuple[List[Dict[str, Any]], Dict[str, str]]:
    """Candidati validi (con id = nome file) ed errori di lettura per file."""
    candidates: List[Dict[str, Any]] = []
    errors: Dict[str, str] = {}
    for path in paths:
        try:
            data = _read_json(path)
            if not isinstance(data, dict):
                raise ValueError("il file deve contenere un oggetto JSON")
        except (OSError, ValueError) as e:
            errors[path.name] = f"{type(e).__name__}: {e}"
            continue
        data = dict(data)
        data["candidate_id"] = path.name
        candidates.append(data)
    return candidates, errors


def _existing_ids(csv_path: Path) -> set:
    if not csv_path.exists():
        return set()
    with csv_path.open("r", encoding="utf-8", newline="") as f:
        return {row.get("cv_file", "") for row in csv.DictReader(f) if row}


def _build_config(args: argparse.Namespace) -> MatcherConfig:
    config = MatcherConfig.from_env()
    overrides: Dict[str, Any] = {}
    if args.strategy:
        overrides["skill_strategy"] = args.strategy
    if args.current_year:
        overrides["current_year"] = args.current_year
    if args.workers:
        overrides["max_workers"] = args.workers
    return config.with_overrides(**overrides) if overrides else config


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Esegue il matching di una job specification contro tutti i CV strutturati "
            "(JSON) di una directory e salva un CSV con score, breakdown e spiegazioni."
        )
    )
    parser.add_argument("--job", default="data/jobs/software_developer.json", help="File JSON con la job specification.")
    parser.add_argument("--cvs-dir", default="data/candidates", help="Directory con i profili candidato (JSON).")
    parser.add_argument("--out", default="data/results/batch_results.csv", help="Percorso output CSV.")
    parser.add_argument("--limit", type=int, default=0, help="Se > 0, limita il numero di candidati processati.")
    parser.add_argument("--skip-existing", action="store_true", help="Salta candidati già presenti nel CSV output.")
    parser.add_argument("--strategy", choices=["fuzzy", "semantic"], default=None, help="Strategia di riconciliazione skill.")
    parser.add_argument("--current-year", type=int, default=None, help="Anno di riferimento per le durate.")
    parser.add_argument("--workers", type=int, default=None, help="Numero di thread per il batch.")
    parser.add_argument("--timeout", type=float, default=None, help="Secondi massimi per l'intero batch.")
    parser.add_argument("--verbose", action="store_true", help="Abilita log verbose dell'orchestrator.")

    args = parser.parse_args(argv)

    project_root = Path(__file__).resolve().parent
    job_path = (project_root / args.job).resolve()
    cvs_dir = (project_root / args.cvs_dir).resolve()
    out_path = (project_root / args.out).resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        config = _build_config(args)
    except MatcherConfigError as e:
        raise SystemExit(f"Configurazione non valida: {e}")

    if not job_path.exists():
        raise SystemExit(f"Job specification non trovata: {job_path}")
    try:
        job = JobSpecification.model_validate(_read_json(job_path))
    except ValueError as e:
        raise SystemExit(f"Job specification non valida ({job_path.name}): {e}")

    cv_paths = _iter_files(cvs_dir, extensions=(".json",))
    if not cv_paths:
        raise SystemExit(f"Nessun CV trovato in: {cvs_dir}")

    existing = _existing_ids(out_path) if args.skip_existing else set()
    cv_paths = [p for p in cv_paths if p.name not in existing]
    if args.limit:
        cv_paths = cv_paths[: args.limit]

    candidates, load_errors = _load_candidates(cv_paths)

    orchestrator = MatchingOrchestrator(config=config, verbose=args.verbose)
    matches = orchestrator.match_batch(job, candidates, timeout=args.timeout)

    fieldnames = [
        "run_id",
        "timestamp_utc",
        "cv_file",
        "job_file",
        "job_title",
        "skill_strategy",
        "current_year",
        "overall_score",
        "match_quality",
        "raw_score",
        "completeness",
        *[f"{name}_score" for name in SUB_SCORES],
        "total_years",
        "is_promotion",
        "overqualified",
        "matched_required",
        "missing_required_json",
        "strengths_json",
        "gaps_json",
        "insights_json",
        "caps_json",
        "recommendation",
        "elapsed_ms",
        "error",
    ]

    write_header = not out_path.exists()
    run_stamp = int(time.time())
    rows: List[Dict[str, Any]] = []

    for match in rank(matches):
        row: Dict[str, Any] = {key: "" for key in fieldnames}
        row.update({
            "run_id": f"{job_path.stem}__{Path(match.candidate_id).stem}__{run_stamp}",
            "timestamp_utc": _utc_now_iso(),
            "cv_file": match.candidate_id,
            "job_file": job_path.name,
            "job_title": job.title or "",
            "skill_strategy": config.skill_strategy,
            "current_year": config.current_year or "",
            "elapsed_ms": match.elapsed_ms,
            "error": match.error,
        })
        result = match.result
        if result is not None:
            breakdown = result.breakdown
            row["overall_score"] = result.overall_score
            row["match_quality"] = result.match_quality.value
            row["raw_score"] = result.raw_score
            row["completeness"] = f"{result.completeness:.3f}"
            for name in SUB_SCORES:
                row[f"{name}_score"] = getattr(breakdown, name).score
            row["total_years"] = breakdown.experience.total_years
            row["is_promotion"] = breakdown.career.is_promotion
            row["overqualified"] = breakdown.career.overqualified
            row["matched_required"] = f"{len(breakdown.skills.matched_required)}/{breakdown.skills.total_required}"
            row["missing_required_json"] = _json_dumps(breakdown.skills.missing_required)
            row["strengths_json"] = _json_dumps(result.strengths)
            row["gaps_json"] = _json_dumps(result.gaps)
            row["insights_json"] = _json_dumps(result.insights)
            row["caps_json"] = _json_dumps(result.caps_applied)
            row["recommendation"] = result.recommendation
        rows.append(row)

    for cv_name, error in load_errors.items():
        row = {key: "" for key in fieldnames}
        row.update({"cv_file": cv_name, "job_file": job_path.name, "timestamp_utc": _utc_now_iso(), "error": error})
        rows.append(row)

    with out_path.open("a", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        if write_header:
            writer.writeheader()
        for processed, row in enumerate(rows, start=1):
            writer.writerow(row)
            if row["error"]:
                print(f"  [{processed}] ERRORE {row['cv_file']}: {row['error']}")
            else:
                print(f"  [{processed}] OK {row['cv_file']} -> score={row['overall_score']} ({row['match_quality']})")

    # ═══════════════════════════════════════════════════════════════
    # Summary statistics
    # ═══════════════════════════════════════════════════════════════
    stats_path = out_path.parent / f"{out_path.stem}_stats.csv"
    _generate_batch_stats(out_path, stats_path)

    return 0


# ═══════════════════════════════════════════════════════════════════════
# BATCH STATS GENERATION
# ═══════════════════════════════════════════════════════════════════════

def _safe_float(row: Dict[str, Any], key: str, default: float = 0.0) -> float:
    try:
        return float(row[key])
    except (ValueError, KeyError, TypeError):
        return default


def _safe_int(row: Dict[str, Any], key: str, default: int = 0) -> int:
    try:
        return int(row[key])
    except (ValueError, KeyError, TypeError):
        return default


def _median(values: List[float]) -> float:
    if not values:
        return 0.0
    s = sorted(values)
    n = len(s)
    if n % 2 == 1:
        return s[n // 2]
    return (s[n // 2 - 1] + s[n // 2]) / 2


def _std_dev(values: List[float]) -> float:
    if len(values) < 2:
        return 0.0
    mean = sum(values) / len(values)
    return (sum((x - mean) ** 2 for x in values) / (len(values) - 1)) ** 0.5


def _generate_batch_stats(csv_path: Path, stats_path: Path) -> None:
    """Genera un CSV di statistiche (section, metric, value) sui risultati del batch."""
    if not csv_path.exists():
        return
    with csv_path.open("r", encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))

    if not rows:
        print("\nNessun risultato nel CSV.")
        return

    ok_rows = [r for r in rows if not r.get("error")]
    error_rows = [r for r in rows if r.get("error")]

    scores = [_safe_float(r, "overall_score") for r in ok_rows]
    elapsed_list = [_safe_int(r, "elapsed_ms") for r in ok_rows]

    bands = {band.value: 0 for band in MatchQuality}
    for r in ok_rows:
        quality = r.get("match_quality", "")
        if quality in bands:
            bands[quality] += 1

    stats: List[Dict[str, str]] = []

    def _add(section: str, metric: str, value: Any) -> None:
        stats.append({"section": section, "metric": metric, "value": str(value)})

    # Overview
    _add("overview", "total_candidates", len(rows))
    _add("overview", "ok_candidates", len(ok_rows))
    _add("overview", "error_candidates", len(error_rows))
    _add("overview", "error_rate_%", f"{len(error_rows) / len(rows) * 100:.1f}")

    # Score distribution
    if scores:
        _add("score", "mean", f"{sum(scores)/len(scores):.2f}")
        _add("score", "median", f"{_median(scores):.2f}")
        _add("score", "std_dev", f"{_std_dev(scores):.2f}")
        _add("score", "min", f"{min(scores):.2f}")
        _add("score", "max", f"{max(scores):.2f}")
        for band, count in bands.items():
            _add("match_quality", band, count)

    # Score breakdown
    for name in SUB_SCORES:
        values = [_safe_float(r, f"{name}_score") for r in ok_rows]
        if values:
            _add("score_breakdown", f"{name}_mean", f"{sum(values)/len(values):.2f}")
            _add("score_breakdown", f"{name}_median", f"{_median(values):.2f}")

    capped = [r for r in ok_rows if r.get("caps_json") not in ("", "[]")]
    _add("caps", "capped_candidates", len(capped))

    # Timing
    if elapsed_list:
        _add("timing", "mean_ms", f"{sum(elapsed_list)/len(elapsed_list):.0f}")
        _add("timing", "median_ms", f"{_median([float(e) for e in elapsed_list]):.0f}")
        _add("timing", "max_ms", str(max(elapsed_list)))

    stats_path.parent.mkdir(parents=True, exist_ok=True)
    with stats_path.open("w", encoding="utf-8", newline="") as sf:
        w = csv.DictWriter(sf, fieldnames=["section", "metric", "value"])
        w.writeheader()
        w.writerows(stats)

    print("\n" + "=" * 70)
    print("  SUMMARY – Batch Matching Results")
    print("=" * 70)
    print(f"  Candidati: {len(rows)} totali ({len(ok_rows)} OK, {len(error_rows)} errori)")
    if scores:
        print(f"  Score: media={sum(scores)/len(scores):.1f}  mediana={_median(scores):.1f}  "
              f"min={min(scores):.0f}  max={max(scores):.0f}  std={_std_dev(scores):.1f}")
        print(f"  Quality: {bands}")
    print(f"  Capped: {len(capped)}")
    print(f"  Output CSV: {csv_path}")
    print(f"  Stats CSV:  {stats_path}")
    print("=" * 70)


if __name__ == "__main__":
    raise SystemExit(main())
