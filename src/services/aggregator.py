"""Cross-source aggregation of resolved facts.

One :class:`AggregationContext` lives for one run. Pipeline stages record
facts into it (already resolved to roster canonical names); ``finalize`` is
called once and returns an immutable :class:`AggregatedMetrics` snapshot that
the rules engine consumes.

Merge policy per metric:

* league points: overwrite (a league page is read once per run);
* UEFA phase points: additive across competitions, one share per competition;
* goals: additive across sources, one share per source. Within a single
  document the first table to list a player wins (``merge_document_goals``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Tuple

from domain.models import GoalEvent, Roster

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AggregatedMetrics:
    league_points: Mapping[str, int] = field(default_factory=dict)
    uefa_points: Mapping[str, int] = field(default_factory=dict)
    goals: Mapping[str, int] = field(default_factory=dict)
    goal_events: Mapping[str, Tuple[GoalEvent, ...]] = field(default_factory=dict)
    # Roster entities that received no fact at all during the run
    unmatched_teams: Tuple[str, ...] = ()
    unmatched_players: Tuple[str, ...] = ()

    def league_for(self, team: str) -> int:
        return self.league_points.get(team, 0)

    def uefa_for(self, team: str) -> int:
        return self.uefa_points.get(team, 0)

    def goals_for(self, player: str) -> int:
        return self.goals.get(player, 0)

    def events_for(self, player: str) -> Tuple[GoalEvent, ...]:
        return self.goal_events.get(player, ())


class AggregationContext:
    def __init__(self) -> None:
        self._league: Dict[str, int] = {}
        self._league_source: Dict[str, str] = {}
        self._uefa: Dict[str, Dict[str, int]] = {}
        self._goals: Dict[str, Dict[str, int]] = {}
        self._events: Dict[str, List[GoalEvent]] = {}
        self._finalized = False

    def _check_open(self) -> None:
        if self._finalized:
            raise RuntimeError("AggregationContext already finalized")

    # Team facts -------------------------------------------------------
    def record_league_points(self, team: str, points: int, league: str) -> None:
        self._check_open()
        previous = self._league_source.get(team)
        if previous is not None and previous != league:
            log.warning(
                "%s: league points from %s replace value from %s", team, league, previous
            )
        self._league[team] = points
        self._league_source[team] = league

    def record_uefa_points(self, team: str, points: int, competition: str) -> None:
        self._check_open()
        self._uefa.setdefault(team, {})[competition] = points

    # Player facts -----------------------------------------------------
    def record_goals(self, player: str, goals: int, source: str) -> None:
        self._check_open()
        shares = self._goals.setdefault(player, {})
        shares[source] = goals

    def merge_document_goals(self, scorers: Iterable[Tuple[str, int]], source: str) -> int:
        """Record ``(player, goals)`` pairs from one document, first pair per player wins.

        Returns the number of players recorded.
        """
        seen: set[str] = set()
        for player, goals in scorers:
            if player in seen:
                continue
            seen.add(player)
            self.record_goals(player, goals, source)
        return len(seen)

    def record_goal_events(self, player: str, events: Iterable[GoalEvent]) -> None:
        self._check_open()
        self._events.setdefault(player, []).extend(events)

    # Queries ----------------------------------------------------------
    def has_goal_facts(self, player: str) -> bool:
        return player in self._goals or player in self._events

    def has_team_facts(self, team: str) -> bool:
        return team in self._league or team in self._uefa

    def finalize(self, roster: Roster) -> AggregatedMetrics:
        self._check_open()
        self._finalized = True
        teams = roster.team_names()
        players = roster.player_names()
        metrics = AggregatedMetrics(
            league_points={t: self._league.get(t, 0) for t in teams},
            uefa_points={t: sum(self._uefa.get(t, {}).values()) for t in teams},
            goals={p: sum(self._goals.get(p, {}).values()) for p in players},
            goal_events={p: tuple(self._events.get(p, ())) for p in players},
            unmatched_teams=tuple(t for t in teams if not self.has_team_facts(t)),
            unmatched_players=tuple(p for p in players if not self.has_goal_facts(p)),
        )
        log.debug(
            "aggregated %d teams / %d players (%d / %d without facts)",
            len(teams),
            len(players),
            len(metrics.unmatched_teams),
            len(metrics.unmatched_players),
        )
        return metrics
