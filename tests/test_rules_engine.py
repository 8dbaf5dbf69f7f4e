from datetime import date, datetime, timezone

import pytest

from domain.models import (
    CupCategory,
    CupProgress,
    GoalEvent,
    GoalType,
    Milestone,
    UefaCompetition,
)
from domain.roster import parse_roster
from services.aggregator import AggregationContext
from services.rules_engine import (
    Standing,
    TeamInput,
    TiePolicy,
    calculate_payouts,
    calculate_player_goals,
    calculate_team_points,
    compute_results,
    is_goal_eligible,
    rank_entries,
)
from tests.factories import roster_dict

ACTIVE_FROM = date(2025, 8, 1)


def _domestic(milestone):
    return CupProgress(CupCategory.DOMESTIC, milestone)


def _uefa(competition, milestone):
    return CupProgress(CupCategory.UEFA, milestone, competition)


def test_domestic_winner_bonus_does_not_stack():
    breakdown = calculate_team_points(
        TeamInput("Arsenal", league_points=80, domestic_cup=_domestic(Milestone.WINNER))
    )
    assert breakdown.domestic_cup_points == 15
    assert breakdown.total == 95


def test_cup_math_runner_up_and_champions_league_winner():
    breakdown = calculate_team_points(
        TeamInput(
            "Arsenal",
            league_points=80,
            uefa_phase_points=0,
            domestic_cup=_domestic(Milestone.RUNNER_UP),
            uefa_cup=_uefa(UefaCompetition.CHAMPIONS_LEAGUE, Milestone.WINNER),
        )
    )
    assert breakdown.domestic_cup_points == 12
    assert breakdown.uefa_points == 20
    assert breakdown.total == 112


@pytest.mark.parametrize(
    "competition,milestone,bonus",
    [
        (UefaCompetition.CHAMPIONS_LEAGUE, Milestone.SEMIFINAL, 10),
        (UefaCompetition.EUROPA_LEAGUE, Milestone.WINNER, 12),
        (UefaCompetition.EUROPA_LEAGUE, Milestone.RUNNER_UP, 10),
        (UefaCompetition.CONFERENCE_LEAGUE, Milestone.SEMIFINAL, 6),
    ],
)
def test_uefa_bonus_added_to_phase_points(competition, milestone, bonus):
    breakdown = calculate_team_points(
        TeamInput("Roma", uefa_phase_points=13, uefa_cup=_uefa(competition, milestone))
    )
    assert breakdown.uefa_points == 13 + bonus


def test_goal_exclusions():
    day = date(2025, 10, 4)
    goals = [
        GoalEvent(day, minute=90),
        GoalEvent(day, minute=118),
        GoalEvent(day, type=GoalType.PENALTY_SHOOTOUT),
    ]
    assert calculate_player_goals(goals, ACTIVE_FROM) == 2


def test_active_from_boundary_is_inclusive():
    assert is_goal_eligible(GoalEvent(ACTIVE_FROM, minute=10), ACTIVE_FROM)
    assert not is_goal_eligible(GoalEvent(date(2025, 7, 31), minute=10), ACTIVE_FROM)
    assert is_goal_eligible(GoalEvent(date(2025, 7, 31), minute=10), None)


@pytest.mark.parametrize(
    "event,eligible",
    [
        (GoalEvent(date(2025, 9, 1), type=GoalType.PENALTY), True),
        (GoalEvent(date(2025, 9, 1), type=GoalType.OWN_GOAL), False),
        (GoalEvent(date(2025, 9, 1), competition="UEFA Super Cup"), False),
        (GoalEvent(date(2025, 9, 1), competition="FA Community Shield"), False),
        (GoalEvent(date(2025, 9, 1), competition="Premier League"), True),
    ],
)
def test_goal_type_and_competition_rules(event, eligible):
    assert is_goal_eligible(event, ACTIVE_FROM) is eligible


def _payouts(totals, **kwargs):
    standings = [Standing(f"P{i}", t) for i, t in enumerate(totals)]
    return [p.amount for p in calculate_payouts(standings, **kwargs)]


@pytest.mark.parametrize(
    "totals,expected",
    [
        ([100, 80, 60], [250, 50, 0]),
        ([100, 100, 60], [150, 150, 0]),
        ([100, 100, 100], [100, 100, 100]),
        ([70, 70, 70, 70, 10], [75, 75, 75, 75, 0]),
        ([42], [250]),
    ],
)
def test_payouts(totals, expected):
    assert _payouts(totals) == expected


def test_payouts_empty():
    assert calculate_payouts([]) == []


def test_payouts_alphabetical_tie_policy():
    standings = [
        Standing("Scott", 100),
        Standing("Erik", 100),
        Standing("Owen", 100),
        Standing("Ian", 60),
        Standing("Josh", 40),
    ]
    payouts = {
        p.participant: p.amount
        for p in calculate_payouts(standings, tie_policy=TiePolicy.ALPHABETICAL)
    }
    assert payouts == {"Scott": 0, "Erik": 250, "Owen": 0, "Ian": 50, "Josh": 0}


def test_payouts_two_way_tie_uses_pot():
    assert _payouts([10, 10, 5], pot=500) == [250, 250, 0]


@pytest.mark.parametrize("n", [1, 2, 3, 6])
def test_rank_density(n):
    class Row:
        def __init__(self, total):
            self.total = total
            self.rank = 0

    rows = rank_entries([Row(5) for _ in range(n)], key=lambda r: r.total)
    assert [r.rank for r in rows] == list(range(1, n + 1))


def test_compute_results_combines_tables_events_and_cups():
    roster = parse_roster(
        roster_dict(
            {
                "Erik": {"teams": ["Arsenal", "Roma"], "players": ["Harry Kane"]},
                "Henry": {"teams": ["Liverpool"], "players": ["Mohamed Salah", "Harry Kane"]},
            },
            cup_progress={
                "Arsenal": {
                    "domestic": "runner_up",
                    "uefa": {"competition": "champions_league", "milestone": "winner"},
                }
            },
        )
    )
    ctx = AggregationContext()
    ctx.record_league_points("Arsenal", 80, "Premier League")
    ctx.record_league_points("Liverpool", 70, "Premier League")
    ctx.record_uefa_points("Liverpool", 18, "champions_league")
    ctx.record_goals("Harry Kane", 20, "wiki:Bundesliga")
    ctx.record_goals("Mohamed Salah", 15, "wiki:Premier League")
    ctx.record_goal_events(
        "Harry Kane",
        [
            GoalEvent(date(2025, 9, 1), minute=30),
            GoalEvent(date(2025, 7, 1), minute=30),
            GoalEvent(date(2025, 9, 2), type=GoalType.OWN_GOAL),
        ],
    )
    metrics = ctx.finalize(roster)
    now = datetime(2026, 3, 1, 6, 0, tzinfo=timezone.utc)

    result = compute_results(roster, metrics, now=now)

    assert result.last_updated == "2026-03-01T06:00:00+00:00"
    assert result.season == "2025-26"
    erik, henry = result.team_pool
    assert (erik.participant, erik.total_points, erik.rank) == ("Erik", 112, 1)
    assert erik.teams[1].to_dict() == {
        "name": "Roma",
        "league_points": 0,
        "uefa_points": 0,
        "domestic_cup_points": 0,
    }
    assert (henry.total_points, henry.rank) == (88, 2)

    henry_goals, erik_goals = result.goals_pool
    assert (henry_goals.participant, henry_goals.total_goals, henry_goals.rank) == ("Henry", 36, 1)
    assert (erik_goals.total_goals, erik_goals.rank) == (21, 2)
