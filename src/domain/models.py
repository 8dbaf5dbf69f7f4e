"""Domain models for the pool scoring pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class EntityKind(str, Enum):
    TEAM = "team"
    PLAYER = "player"


class GoalType(str, Enum):
    NORMAL = "normal"
    PENALTY = "penalty"
    OWN_GOAL = "own_goal"
    PENALTY_SHOOTOUT = "penalty_shootout"


class CupCategory(str, Enum):
    DOMESTIC = "domestic"
    UEFA = "uefa"


class Milestone(str, Enum):
    SEMIFINAL = "semifinal"
    RUNNER_UP = "runner_up"
    WINNER = "winner"


class UefaCompetition(str, Enum):
    CHAMPIONS_LEAGUE = "champions_league"
    EUROPA_LEAGUE = "europa_league"
    CONFERENCE_LEAGUE = "conference_league"


# Roster ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RosterTeam:
    name: str


@dataclass(frozen=True, slots=True)
class RosterPlayer:
    name: str
    active_from_date: Optional[date] = None


@dataclass(frozen=True, slots=True)
class Participant:
    name: str
    teams: Tuple[RosterTeam, ...] = ()
    players: Tuple[RosterPlayer, ...] = ()


@dataclass(frozen=True, slots=True)
class CupProgress:
    category: CupCategory
    milestone: Milestone
    competition: Optional[UefaCompetition] = None


@dataclass(frozen=True, slots=True)
class Roster:
    season: str
    participants: Tuple[Participant, ...]
    name: Optional[str] = None
    # team canonical name -> {category -> progress}; at most one per category
    cup_progress: Dict[str, Dict[CupCategory, CupProgress]] = field(default_factory=dict)

    def team_names(self) -> List[str]:
        seen: Dict[str, None] = {}
        for p in self.participants:
            for t in p.teams:
                seen.setdefault(t.name, None)
        return list(seen)

    def player_names(self) -> List[str]:
        seen: Dict[str, None] = {}
        for p in self.participants:
            for pl in p.players:
                seen.setdefault(pl.name, None)
        return list(seen)


# Source facts ---------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GoalEvent:
    date: date
    minute: Optional[int] = None
    type: GoalType = GoalType.NORMAL
    competition: str = ""


# Derived results ------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    name: str
    league_points: int
    uefa_points: int
    domestic_cup_points: int

    @property
    def total(self) -> int:
        return self.league_points + self.uefa_points + self.domestic_cup_points

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "league_points": self.league_points,
            "uefa_points": self.uefa_points,
            "domestic_cup_points": self.domestic_cup_points,
        }


@dataclass(frozen=True, slots=True)
class PlayerGoals:
    name: str
    goals: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "goals": self.goals}


@dataclass(slots=True)
class TeamPoolEntry:
    participant: str
    total_points: Any
    rank: int = 0
    teams: List[ScoreBreakdown] = field(default_factory=list)

    @property
    def total(self) -> Any:
        return self.total_points

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participant": self.participant,
            "total_points": self.total_points,
            "rank": self.rank,
            "teams": [t.to_dict() for t in self.teams],
        }


@dataclass(slots=True)
class GoalsPoolEntry:
    participant: str
    total_goals: Any
    rank: int = 0
    players: List[PlayerGoals] = field(default_factory=list)

    @property
    def total(self) -> Any:
        return self.total_goals

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participant": self.participant,
            "total_goals": self.total_goals,
            "rank": self.rank,
            "players": [p.to_dict() for p in self.players],
        }


@dataclass(slots=True)
class PoolResult:
    last_updated: str
    season: str
    team_pool: List[TeamPoolEntry] = field(default_factory=list)
    goals_pool: List[GoalsPoolEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "last_updated": self.last_updated,
            "season": self.season,
            "team_pool": [e.to_dict() for e in self.team_pool],
            "goals_pool": [e.to_dict() for e in self.goals_pool],
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "PoolResult":
        """Rebuild a result from its persisted shape.

        Totals are carried over as found (no coercion) so the integrity gate
        can judge them.
        """
        team_pool = [
            TeamPoolEntry(
                participant=e.get("participant"),
                total_points=e.get("total_points"),
                rank=e.get("rank", 0),
                teams=[
                    ScoreBreakdown(
                        name=t.get("name", ""),
                        league_points=t.get("league_points", 0),
                        uefa_points=t.get("uefa_points", 0),
                        domestic_cup_points=t.get("domestic_cup_points", 0),
                    )
                    for t in e.get("teams", [])
                ],
            )
            for e in raw.get("team_pool", [])
        ]
        goals_pool = [
            GoalsPoolEntry(
                participant=e.get("participant"),
                total_goals=e.get("total_goals"),
                rank=e.get("rank", 0),
                players=[
                    PlayerGoals(name=p.get("name", ""), goals=p.get("goals", 0))
                    for p in e.get("players", [])
                ],
            )
            for e in raw.get("goals_pool", [])
        ]
        return cls(
            last_updated=raw.get("last_updated", ""),
            season=str(raw.get("season", "")),
            team_pool=team_pool,
            goals_pool=goals_pool,
        )


@dataclass(frozen=True, slots=True)
class Payout:
    participant: str
    amount: float
