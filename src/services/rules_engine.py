"""Scoring rules for the team pool and the goals pool.

Pure functions, no I/O. Cup milestone bonuses never stack: a team carries at
most one milestone per cup category and only that milestone's bonus counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from config import settings
from domain.models import (
    CupCategory,
    CupProgress,
    GoalEvent,
    GoalsPoolEntry,
    GoalType,
    Milestone,
    Payout,
    PlayerGoals,
    PoolResult,
    Roster,
    ScoreBreakdown,
    TeamPoolEntry,
    UefaCompetition,
)
from services.aggregator import AggregatedMetrics

__all__ = [
    "DOMESTIC_CUP_MILESTONES",
    "UEFA_CUP_MILESTONES",
    "SUPERCUP_KEYWORDS",
    "TiePolicy",
    "TeamInput",
    "Standing",
    "is_supercup",
    "domestic_cup_bonus",
    "uefa_cup_bonus",
    "calculate_team_points",
    "is_goal_eligible",
    "calculate_player_goals",
    "rank_entries",
    "calculate_payouts",
    "compute_results",
]

DOMESTIC_CUP_MILESTONES: Dict[Milestone, int] = {
    Milestone.WINNER: 15,
    Milestone.RUNNER_UP: 12,
    Milestone.SEMIFINAL: 8,
}

UEFA_CUP_MILESTONES: Dict[UefaCompetition, Dict[Milestone, int]] = {
    UefaCompetition.CHAMPIONS_LEAGUE: {
        Milestone.WINNER: 20,
        Milestone.RUNNER_UP: 15,
        Milestone.SEMIFINAL: 10,
    },
    UefaCompetition.EUROPA_LEAGUE: {
        Milestone.WINNER: 12,
        Milestone.RUNNER_UP: 10,
        Milestone.SEMIFINAL: 6,
    },
    UefaCompetition.CONFERENCE_LEAGUE: {
        Milestone.WINNER: 12,
        Milestone.RUNNER_UP: 10,
        Milestone.SEMIFINAL: 6,
    },
}

SUPERCUP_KEYWORDS = (
    "super cup",
    "supercup",
    "community shield",
    "supercopa",
    "supercoppa",
    "trophée des champions",
    "dfl-supercup",
)

EXCLUDED_GOAL_TYPES = frozenset({GoalType.OWN_GOAL, GoalType.PENALTY_SHOOTOUT})

FIRST_PLACE_PAYOUT = 250
SECOND_PLACE_PAYOUT = 50


class TiePolicy(str, Enum):
    """How a three-or-more-way tie for first place is paid out."""

    # pot / k to every tied leader, nobody else is paid
    EVEN_SPLIT = "even-split"
    # first display name in ascending order takes first place; next-highest
    # total below the tied group takes second place
    ALPHABETICAL = "alphabetical"


@dataclass(frozen=True, slots=True)
class TeamInput:
    name: str
    league_points: int = 0
    uefa_phase_points: int = 0
    domestic_cup: Optional[CupProgress] = None
    uefa_cup: Optional[CupProgress] = None


@dataclass(frozen=True, slots=True)
class Standing:
    participant: str
    total: float


def is_supercup(competition: str | None) -> bool:
    lower = (competition or "").lower()
    return any(kw in lower for kw in SUPERCUP_KEYWORDS)


def domestic_cup_bonus(progress: Optional[CupProgress]) -> int:
    if progress is None:
        return 0
    return DOMESTIC_CUP_MILESTONES.get(progress.milestone, 0)


def uefa_cup_bonus(progress: Optional[CupProgress]) -> int:
    if progress is None or progress.competition is None:
        return 0
    return UEFA_CUP_MILESTONES.get(progress.competition, {}).get(progress.milestone, 0)


def calculate_team_points(team: TeamInput) -> ScoreBreakdown:
    domestic = domestic_cup_bonus(team.domestic_cup)
    uefa_bonus = uefa_cup_bonus(team.uefa_cup)
    return ScoreBreakdown(
        name=team.name,
        league_points=team.league_points,
        uefa_points=team.uefa_phase_points + uefa_bonus,
        domestic_cup_points=domestic,
    )


def is_goal_eligible(event: GoalEvent, active_from: Optional[date]) -> bool:
    if active_from is not None and event.date < active_from:
        return False
    if event.type in EXCLUDED_GOAL_TYPES:
        return False
    return not is_supercup(event.competition)


def calculate_player_goals(events: Iterable[GoalEvent], active_from: Optional[date]) -> int:
    """Count eligible goal events; in-match penalties and extra-time goals count."""
    return sum(1 for e in events if is_goal_eligible(e, active_from))


E = TypeVar("E")


def rank_entries(entries: List[E], key: Callable[[E], Any]) -> List[E]:
    """Sort descending by ``key`` (stable) and assign ranks 1..N by position.

    Equal totals get consecutive ranks, never a shared one.
    """
    entries.sort(key=key, reverse=True)
    for idx, entry in enumerate(entries, start=1):
        entry.rank = idx  # type: ignore[attr-defined]
    return entries


def calculate_payouts(
    standings: Sequence[Any],
    pot: float = settings.POOL_POT,
    tie_policy: TiePolicy = TiePolicy.EVEN_SPLIT,
) -> List[Payout]:
    """Payouts for one pool, in descending order of total.

    ``standings`` items need ``participant`` and ``total`` attributes (pool
    entries and :class:`Standing` both qualify).
    """
    if not standings:
        return []
    ordered = sorted(standings, key=lambda s: s.total, reverse=True)
    top = ordered[0].total
    tied = [s for s in ordered if s.total == top]
    amounts: Dict[str, float] = {s.participant: 0 for s in ordered}

    if len(tied) == 1:
        amounts[ordered[0].participant] = FIRST_PLACE_PAYOUT
        if len(ordered) > 1:
            amounts[ordered[1].participant] = SECOND_PLACE_PAYOUT
    elif len(tied) == 2:
        for s in tied:
            amounts[s.participant] = pot / 2
    elif tie_policy is TiePolicy.ALPHABETICAL:
        winner = min(s.participant for s in tied)
        amounts[winner] = FIRST_PLACE_PAYOUT
        below = [s for s in ordered if s.total < top]
        if below:
            amounts[below[0].participant] = SECOND_PLACE_PAYOUT
    else:
        for s in tied:
            amounts[s.participant] = pot / len(tied)

    return [Payout(participant=s.participant, amount=amounts[s.participant]) for s in ordered]


def _team_input(name: str, roster: Roster, metrics: AggregatedMetrics) -> TeamInput:
    progress = roster.cup_progress.get(name, {})
    return TeamInput(
        name=name,
        league_points=metrics.league_for(name),
        uefa_phase_points=metrics.uefa_for(name),
        domestic_cup=progress.get(CupCategory.DOMESTIC),
        uefa_cup=progress.get(CupCategory.UEFA),
    )


def compute_results(
    roster: Roster, metrics: AggregatedMetrics, now: Optional[datetime] = None
) -> PoolResult:
    """Build both ranked pools from aggregated metrics.

    A player's goals are the table-derived season total plus the eligible
    goal events recorded for them.
    """
    now = now or datetime.now(timezone.utc)
    team_pool: List[TeamPoolEntry] = []
    goals_pool: List[GoalsPoolEntry] = []

    for participant in roster.participants:
        breakdowns = [
            calculate_team_points(_team_input(t.name, roster, metrics)) for t in participant.teams
        ]
        team_pool.append(
            TeamPoolEntry(
                participant=participant.name,
                total_points=sum(b.total for b in breakdowns),
                teams=breakdowns,
            )
        )

        players = [
            PlayerGoals(
                name=p.name,
                goals=metrics.goals_for(p.name)
                + calculate_player_goals(metrics.events_for(p.name), p.active_from_date),
            )
            for p in participant.players
        ]
        goals_pool.append(
            GoalsPoolEntry(
                participant=participant.name,
                total_goals=sum(p.goals for p in players),
                players=players,
            )
        )

    rank_entries(team_pool, key=lambda e: e.total_points)
    rank_entries(goals_pool, key=lambda e: e.total_goals)
    return PoolResult(
        last_updated=now.isoformat(timespec="seconds"),
        season=roster.season,
        team_pool=team_pool,
        goals_pool=goals_pool,
    )
