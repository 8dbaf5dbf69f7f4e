import json

from cli import score_report, update_standings
from config.settings import ConfigurationError
from core.scheduler import RunReport
from domain.models import GoalsPoolEntry, PoolResult, TeamPoolEntry
from services.integrity_gate import GateReport, IntegrityGateError, IntegrityIssue
from services.pipeline import UpdateOutcome
from tracking.snapshot_store import save_snapshot


def _result():
    return PoolResult(
        last_updated="2026-03-01T06:00:00+00:00",
        season="2025-26",
        team_pool=[
            TeamPoolEntry("Bob", 160, rank=1),
            TeamPoolEntry("Alice", 158, rank=2),
            TeamPoolEntry("Carol", 100, rank=3),
        ],
        goals_pool=[
            GoalsPoolEntry("Alice", 40, rank=1),
            GoalsPoolEntry("Bob", 40, rank=2),
            GoalsPoolEntry("Carol", 40, rank=3),
        ],
    )


def test_update_exit_ok_with_json_summary(monkeypatch, capsys, tmp_path):
    seen = {}

    def fake_run_update(data_dir, **kwargs):
        seen.update(kwargs, data_dir=data_dir)
        return UpdateOutcome(_result(), RunReport(succeeded=["Premier League"]), GateReport(), "results.json", True)

    monkeypatch.setattr(update_standings.pipeline, "run_update", fake_run_update)
    code = update_standings.main(["--data-dir", str(tmp_path), "--delay", "0", "--json"])
    assert code == update_standings.EXIT_OK
    assert seen["data_dir"] == str(tmp_path)
    assert seen["delay_policy"].seconds == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["sources_ok"] == 1
    assert summary["team_pool"][0]["participant"] == "Bob"


def test_update_gate_failure_lists_issues(monkeypatch, capsys):
    issue = IntegrityIssue("monotonic", "team_pool", "Alice", "team_pool: Alice total_points dropped 158 -> 148", 158, 148)

    def fake_run_update(data_dir, **kwargs):
        raise IntegrityGateError(GateReport([issue]))

    monkeypatch.setattr(update_standings.pipeline, "run_update", fake_run_update)
    assert update_standings.main([]) == update_standings.EXIT_GATE_FAILED
    err = capsys.readouterr().err
    assert "[monotonic] team_pool: Alice total_points dropped 158 -> 148" in err


def test_update_configuration_error(monkeypatch, capsys):
    def fake_run_update(data_dir, **kwargs):
        raise ConfigurationError("Missing credential: set the API_FOOTBALL_KEY environment variable")

    monkeypatch.setattr(update_standings.pipeline, "run_update", fake_run_update)
    assert update_standings.main(["--source", "api"]) == update_standings.EXIT_CONFIG_ERROR
    assert "API_FOOTBALL_KEY" in capsys.readouterr().err


def test_report_json_includes_payouts(tmp_path, capsys):
    path = str(tmp_path / "results.json")
    save_snapshot(_result(), path)
    assert score_report.main(["--results", path, "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert [(r["participant"], r["payout"]) for r in report["team_pool"]] == [
        ("Bob", 250),
        ("Alice", 50),
        ("Carol", 0),
    ]
    assert [r["payout"] for r in report["goals_pool"]] == [100, 100, 100]


def test_report_alphabetical_tie_policy(tmp_path, capsys):
    save_snapshot(_result(), str(tmp_path / "results.json"))
    assert score_report.main(["--data-dir", str(tmp_path), "--tie-policy", "alphabetical"]) == 0
    out = capsys.readouterr().out
    assert "Goals pool:" in out
    assert "Alice" in out and "payout 250" in out


def test_report_without_snapshot(tmp_path, capsys):
    assert score_report.main(["--data-dir", str(tmp_path)]) == 1
    assert "No snapshot" in capsys.readouterr().err
