"""Credentialed JSON source variant (API-Football).

Emits the same facts as the page scraper into an :class:`AggregationContext`:
domestic league points, UEFA phase points and per-competition goal totals
(supercup competitions excluded). Team and player identity comes from the
curated id maps in ``config.api_ids``, so no name resolution is needed.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from config import api_ids, settings
from core.http_client import Fetcher
from core.scheduler import SourceTask
from domain.models import Roster
from services.aggregator import AggregationContext
from services.rules_engine import is_supercup

log = logging.getLogger(__name__)

API_KEY_HEADER = "x-apisports-key"
_SEASON_YEAR_RE = re.compile(r"(\d{4})")


def api_season(season: str) -> int:
    """API season year from a pool season label ("2025-26" -> 2025)."""
    m = _SEASON_YEAR_RE.search(season or "")
    if not m:
        raise ValueError(f"Season label without a year: {season!r}")
    return int(m.group(1))


def build_fetcher(api_key: str, **kwargs: Any) -> Fetcher:
    return Fetcher(headers={API_KEY_HEADER: api_key}, **kwargs)


def standings_entries(payload: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    """Flatten ``response[0].league.standings`` (a list of groups) into entries."""
    response = payload.get("response") or []
    if not response:
        return []
    groups = ((response[0] or {}).get("league") or {}).get("standings") or []
    entries: List[Mapping[str, Any]] = []
    for group in groups:
        entries.extend(group or [])
    return entries


def competition_goals(payload: Mapping[str, Any]) -> Dict[str, int]:
    """``{competition name: goals}`` from a ``/players`` payload, supercups dropped."""
    response = payload.get("response") or []
    if not response:
        return {}
    goals: Dict[str, int] = {}
    for stat in (response[0] or {}).get("statistics") or []:
        league = (stat.get("league") or {}).get("name") or ""
        if is_supercup(league):
            continue
        total = (stat.get("goals") or {}).get("total") or 0
        goals[league] = goals.get(league, 0) + int(total)
    return goals


class ApiFootballSource:
    def __init__(
        self,
        fetcher: Fetcher,
        season: int,
        *,
        base_url: Optional[str] = None,
        team_ids: Optional[Mapping[str, int]] = None,
        player_ids: Optional[Mapping[str, int]] = None,
    ) -> None:
        self.fetcher = fetcher
        self.season = season
        self.base_url = base_url or f"https://{settings.API_HOST}"
        self.team_ids = dict(team_ids if team_ids is not None else api_ids.TEAM_IDS)
        self.player_ids = dict(player_ids if player_ids is not None else api_ids.PLAYER_IDS)

    def _get(self, endpoint: str, **params: Any) -> Mapping[str, Any]:
        payload = self.fetcher.fetch_json(f"{self.base_url}{endpoint}", params=params)
        if not isinstance(payload, Mapping):
            return {}
        errors = payload.get("errors")
        if errors:
            log.warning("API error for %s %s: %s", endpoint, params, errors)
        return payload

    def _teams_by_id(self, teams: Iterable[str]) -> Dict[int, str]:
        out: Dict[int, str] = {}
        for name in teams:
            tid = self.team_ids.get(name)
            if tid is None:
                log.warning("No API team id for %s", name)
                continue
            out[tid] = name
        return out

    def load_league(
        self, ctx: AggregationContext, league_id: int, teams_by_id: Mapping[int, str]
    ) -> int:
        league_name = api_ids.DOMESTIC_LEAGUES.get(league_id, f"League {league_id}")
        matched = 0
        for entry in standings_entries(self._get("/standings", league=league_id, season=self.season)):
            team = teams_by_id.get((entry.get("team") or {}).get("id"))
            if team:
                ctx.record_league_points(team, int(entry.get("points") or 0), league_name)
                matched += 1
        log.info("%s: %d roster teams matched", league_name, matched)
        return matched

    def load_uefa(
        self, ctx: AggregationContext, league_id: int, teams_by_id: Mapping[int, str]
    ) -> int:
        competition = api_ids.UEFA_LEAGUES[league_id]
        matched = 0
        for entry in standings_entries(self._get("/standings", league=league_id, season=self.season)):
            team = teams_by_id.get((entry.get("team") or {}).get("id"))
            if team:
                ctx.record_uefa_points(team, int(entry.get("points") or 0), competition)
                matched += 1
        log.info("%s: %d roster teams matched", competition, matched)
        return matched

    def load_player(self, ctx: AggregationContext, player: str) -> int:
        pid = self.player_ids[player]
        per_competition = competition_goals(self._get("/players", id=pid, season=self.season))
        if not per_competition:
            log.warning("%s: no statistics found (id %s)", player, pid)
        for competition, goals in per_competition.items():
            ctx.record_goals(player, goals, f"api:{competition}")
        return sum(per_competition.values())

    def tasks(self, ctx: AggregationContext, roster: Roster) -> List[SourceTask]:
        """Fetch tasks in fixed order: domestic leagues, UEFA, then players."""
        teams_by_id = self._teams_by_id(roster.team_names())
        tasks: List[SourceTask] = []
        for league_id, name in api_ids.DOMESTIC_LEAGUES.items():
            tasks.append(
                SourceTask(
                    f"api standings {name}",
                    lambda lid=league_id: self.load_league(ctx, lid, teams_by_id),
                )
            )
        for league_id, competition in api_ids.UEFA_LEAGUES.items():
            tasks.append(
                SourceTask(
                    f"api standings {competition}",
                    lambda lid=league_id: self.load_uefa(ctx, lid, teams_by_id),
                )
            )
        for player in roster.player_names():
            if player not in self.player_ids:
                log.warning("No API player id for %s", player)
                continue
            tasks.append(
                SourceTask(f"api player {player}", lambda p=player: self.load_player(ctx, p))
            )
        return tasks
