import json
from datetime import date

import pytest

from domain.models import CupCategory, Milestone, UefaCompetition
from domain.roster import RosterError, load_roster, parse_roster
from tests.factories import roster_dict, write_roster


def _raw(**kwargs):
    return roster_dict(
        {
            "Erik": {"teams": ["Arsenal", "Chelsea"], "players": ["Harry Kane"]},
            "Henry": {"teams": ["Liverpool", "Arsenal"], "players": ["Mohamed Salah"]},
        },
        **kwargs,
    )


def test_parse_roster_builds_ordered_participants():
    roster = parse_roster(_raw())
    assert roster.season == "2025-26"
    assert [p.name for p in roster.participants] == ["Erik", "Henry"]
    assert roster.team_names() == ["Arsenal", "Chelsea", "Liverpool"]
    kane = roster.participants[0].players[0]
    assert kane.active_from_date == date(2025, 8, 1)


def test_missing_active_from_date_means_all_goals_count():
    roster = parse_roster(_raw(active_from=None))
    assert roster.participants[0].players[0].active_from_date is None


def test_cup_progress_parsed():
    roster = parse_roster(
        _raw(
            cup_progress={
                "Arsenal": {
                    "domestic": "runner_up",
                    "uefa": {"competition": "champions_league", "milestone": "winner"},
                }
            }
        )
    )
    progress = roster.cup_progress["Arsenal"]
    assert progress[CupCategory.DOMESTIC].milestone is Milestone.RUNNER_UP
    assert progress[CupCategory.UEFA].competition is UefaCompetition.CHAMPIONS_LEAGUE


@pytest.mark.parametrize(
    "mutate",
    [
        lambda r: r["pool_metadata"].pop("season"),
        lambda r: r.update(rosters=[]),
        lambda r: r["rosters"][1].update(participant="Erik"),
        lambda r: r["rosters"][0].update(participant=" "),
        lambda r: r["rosters"][0]["players"][0].update(active_from_date="not-a-date"),
        lambda r: r.update(cup_progress={"Barcelona": {"domestic": "winner"}}),
        lambda r: r.update(cup_progress={"Arsenal": {"domestic": "quarterfinal"}}),
        lambda r: r.update(cup_progress={"Arsenal": {"league_cup": "winner"}}),
    ],
)
def test_invalid_roster_rejected(mutate):
    raw = _raw()
    mutate(raw)
    with pytest.raises(RosterError):
        parse_roster(raw)


def test_load_roster_reads_file(tmp_path):
    path = write_roster(tmp_path, _raw())
    assert len(load_roster(path).participants) == 2


def test_load_roster_missing_file(tmp_path):
    with pytest.raises(RosterError, match="not found"):
        load_roster(tmp_path / "rosters.json")


def test_load_roster_invalid_json(tmp_path):
    path = tmp_path / "rosters.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RosterError, match="unreadable"):
        load_roster(path)


def test_load_roster_requires_object(tmp_path):
    path = tmp_path / "rosters.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(RosterError):
        load_roster(path)
