"""
Test Batch CLI
"""

import csv
import json

import pytest

from run_batch_matching import _median, _std_dev, main


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def batch_dirs(tmp_path):
    cvs = tmp_path / "cvs"
    cvs.mkdir()
    _write(cvs / "dev.json", {
        "skills": ["React", "SQL"],
        "experience": [{"title": "Software Engineer", "duration": "2020 - Present"}],
        "location": "Cape Town",
    })
    _write(cvs / "chef.json", {"skills": ["Cooking"], "experience": [{"title": "Chef"}]})
    (cvs / "broken.json").write_text("{not json", encoding="utf-8")
    job = tmp_path / "job.json"
    _write(job, {"title": "Software Developer", "requiredSkills": "React, SQL", "locationType": "remote"})
    return job, cvs, tmp_path / "out" / "results.csv"


def test_batch_cli_writes_ranked_csv_and_stats(batch_dirs, capsys):
    job, cvs, out = batch_dirs
    code = main(["--job", str(job), "--cvs-dir", str(cvs), "--out", str(out), "--current-year", "2025"])
    assert code == 0

    with out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert [r["cv_file"] for r in rows] == ["dev.json", "chef.json", "broken.json"]
    assert rows[0]["error"] == ""
    assert int(rows[0]["overall_score"]) > int(rows[1]["overall_score"])
    assert rows[2]["error"].startswith("JSONDecodeError")

    stats_path = out.parent / "results_stats.csv"
    with stats_path.open(encoding="utf-8", newline="") as f:
        stats = {(r["section"], r["metric"]): r["value"] for r in csv.DictReader(f)}
    assert stats[("overview", "total_candidates")] == "3"
    assert stats[("overview", "error_candidates")] == "1"
    assert "SUMMARY" in capsys.readouterr().out


def test_batch_cli_skip_existing(batch_dirs):
    job, cvs, out = batch_dirs
    args = ["--job", str(job), "--cvs-dir", str(cvs), "--out", str(out), "--current-year", "2025"]
    main(args)
    main(args + ["--skip-existing"])
    with out.open(encoding="utf-8", newline="") as f:
        assert len(list(csv.DictReader(f))) == 3


def test_batch_cli_missing_job(tmp_path):
    with pytest.raises(SystemExit):
        main(["--job", str(tmp_path / "missing.json"), "--cvs-dir", str(tmp_path)])


def test_batch_cli_invalid_config(batch_dirs, monkeypatch):
    job, cvs, out = batch_dirs
    monkeypatch.setenv("CVMATCH_WEIGHTS", "title:0.9")
    with pytest.raises(SystemExit):
        main(["--job", str(job), "--cvs-dir", str(cvs), "--out", str(out)])


def test_stats_helpers():
    assert _median([3.0, 1.0, 2.0]) == 2.0
    assert _median([1.0, 2.0, 3.0, 4.0]) == 2.5
    assert _median([]) == 0.0
    assert _std_dev([5.0]) == 0.0
    assert _std_dev([2.0, 4.0]) == pytest.approx(2 ** 0.5)
