import json
import os

import pytest

from config.settings import ConfigurationError
from config.sources import KIND_LEAGUE, KIND_UEFA, SourcePage
from core.scheduler import NoDelay
from domain.roster import RosterError
from services.integrity_gate import IntegrityGateError
from services.pipeline import SOURCE_API, WikiSource, run_update
from tracking.snapshot_store import SnapshotError
from tests.factories import page, ranked_scorers_table, roster_dict, squad_table, standings_table, write_roster

LEAGUE_URL = "https://wiki.test/Premier_League"
CL_URL = "https://wiki.test/Champions_League"
CLUB_URL = "https://wiki.test/Bayern_season"

ROSTER = roster_dict(
    {
        "Alice": {"teams": ["Arsenal", "Chelsea"], "players": ["Harry Kane", "Cole Palmer"]},
        "Bob": {"teams": ["Manchester City", "Liverpool"], "players": ["Erling Haaland", "Mohamed Salah"]},
    }
)


def _league_page(arsenal=80):
    return page(
        standings_table(
            [
                ("Arsenal", arsenal),
                ("Manchester City", 75),
                ("Liverpool", 70),
                ("Chelsea", 60),
                ("Everton", 50),
                ("Fulham", 40),
            ]
        ),
        ranked_scorers_table(
            [("Erling Haaland", 20), ("Mohamed Salah", 15), ("Cole Palmer", None), ("Someone Else", 3)]
        ),
    )


def _cl_page():
    return page(
        standings_table([("Arsenal", 18), ("Liverpool", 15), ("Barcelona", 12)]),
        ranked_scorers_table([("Erling Haaland", 5)]),
    )


def _club_page():
    return page(squad_table([("Harry Kane", [(28, 22), (2, 3)]), ("Michael Olise", [(30, 10), (3, 1)])]))


def _wiki_factory(fetcher, resolver):
    return WikiSource(
        fetcher,
        resolver,
        league_pages=[SourcePage("Premier League", LEAGUE_URL, KIND_LEAGUE)],
        uefa_pages=[SourcePage("Champions League", CL_URL, KIND_UEFA, competition="champions_league")],
        club_pages=lambda missing: {CLUB_URL: list(missing)},
    )


@pytest.fixture
def data_dir(tmp_path):
    write_roster(tmp_path, ROSTER)
    return tmp_path


@pytest.fixture
def fetcher(fake_fetcher):
    fake_fetcher.pages.update({LEAGUE_URL: _league_page(), CL_URL: _cl_page(), CLUB_URL: _club_page()})
    return fake_fetcher


def _run(data_dir, fetcher, now, **kwargs):
    return run_update(
        str(data_dir),
        fetcher=fetcher,
        delay_policy=NoDelay(),
        now=now,
        wiki_source_factory=_wiki_factory,
        **kwargs,
    )


def test_end_to_end_scores_and_persists(data_dir, fetcher, fixed_now):
    outcome = _run(data_dir, fetcher, fixed_now)

    assert fetcher.calls == [LEAGUE_URL, CL_URL, CLUB_URL]
    assert outcome.written
    assert outcome.run_report.failed == []
    team = {e.participant: (e.rank, e.total_points) for e in outcome.result.team_pool}
    assert team == {"Bob": (1, 160), "Alice": (2, 158)}
    goals = [(e.participant, e.rank, e.total_goals) for e in outcome.result.goals_pool]
    assert goals == [("Alice", 1, 40), ("Bob", 2, 40)]

    raw = json.loads((data_dir / "results.json").read_text(encoding="utf-8"))
    assert raw["last_updated"] == "2026-03-01T06:00:00+00:00"
    assert raw["team_pool"][0]["participant"] == "Bob"
    alice_players = raw["goals_pool"][0]["players"]
    assert alice_players == [{"name": "Harry Kane", "goals": 25}, {"name": "Cole Palmer", "goals": 15}]


def test_second_run_with_unchanged_sources_is_idempotent(data_dir, fetcher, fixed_now):
    _run(data_dir, fetcher, fixed_now)
    first = (data_dir / "results.json").read_text(encoding="utf-8")
    outcome = _run(data_dir, fetcher, fixed_now)
    assert outcome.gate_report.valid
    assert (data_dir / "results.json").read_text(encoding="utf-8") == first


def test_regression_aborts_and_keeps_previous_snapshot(data_dir, fetcher, fixed_now):
    _run(data_dir, fetcher, fixed_now)
    before = (data_dir / "results.json").read_text(encoding="utf-8")
    fetcher.pages[LEAGUE_URL] = _league_page(arsenal=70)

    with pytest.raises(IntegrityGateError) as exc:
        _run(data_dir, fetcher, fixed_now)

    (issue,) = exc.value.report.issues
    assert (issue.participant, issue.old, issue.new) == ("Alice", 158, 148)
    assert (data_dir / "results.json").read_text(encoding="utf-8") == before


def test_failed_source_contributes_nothing(data_dir, fetcher, fixed_now):
    fetcher.failing[CL_URL] = "HTTP 503 for champions league"
    outcome = _run(data_dir, fetcher, fixed_now)
    assert [f.name for f in outcome.run_report.failed] == ["Champions League"]
    team = {e.participant: e.total_points for e in outcome.result.team_pool}
    assert team == {"Alice": 140, "Bob": 145}
    goals = {e.participant: e.total_goals for e in outcome.result.goals_pool}
    assert goals["Bob"] == 35


def test_players_left_without_goals_are_reported(data_dir, fetcher, fixed_now):
    del fetcher.pages[CLUB_URL]
    outcome = _run(data_dir, fetcher, fixed_now)
    assert "player Harry Kane: no goals found" in outcome.warnings
    assert outcome.result.goals_pool[0].participant == "Bob"


def test_dry_run_does_not_write(data_dir, fetcher, fixed_now):
    outcome = _run(data_dir, fetcher, fixed_now, dry_run=True)
    assert not outcome.written
    assert not (data_dir / "results.json").exists()
    assert outcome.to_dict()["team_pool"][0] == {"rank": 1, "participant": "Bob", "total_points": 160}


def test_archive_dir_keeps_fetched_pages(data_dir, fetcher, fixed_now, tmp_path):
    archive = tmp_path / "archive"

    def factory(f, resolver):
        source = _wiki_factory(f, resolver)
        source.archive_dir = str(archive)
        return source

    run_update(str(data_dir), fetcher=fetcher, delay_policy=NoDelay(), now=fixed_now, wiki_source_factory=factory)
    assert len(os.listdir(archive)) == 3


def test_missing_roster_fails_before_fetch(tmp_path, fetcher, fixed_now):
    with pytest.raises(RosterError):
        _run(tmp_path / "empty", fetcher, fixed_now)
    assert fetcher.calls == []


def test_unreadable_snapshot_fails_before_fetch(data_dir, fetcher, fixed_now):
    (data_dir / "results.json").write_text("{oops", encoding="utf-8")
    with pytest.raises(SnapshotError):
        _run(data_dir, fetcher, fixed_now)
    assert fetcher.calls == []


def test_unknown_source_rejected(data_dir, fetcher, fixed_now):
    with pytest.raises(ConfigurationError):
        _run(data_dir, fetcher, fixed_now, source="rss")
    assert fetcher.calls == []


def test_api_source_requires_credential(data_dir, fetcher, fixed_now):
    with pytest.raises(ConfigurationError, match="API_FOOTBALL_KEY"):
        _run(data_dir, fetcher, fixed_now, source=SOURCE_API, env={})
    assert fetcher.calls == []


def test_api_source_rejects_season_without_year(tmp_path, fetcher, fixed_now):
    write_roster(tmp_path, roster_dict({"Alice": {"teams": ["Arsenal"]}}, season="next season"))
    with pytest.raises(ConfigurationError, match="next season"):
        _run(tmp_path, fetcher, fixed_now, source=SOURCE_API, env={"API_FOOTBALL_KEY": "secret"})
    assert fetcher.calls == []
