"""Roster configuration loading.

The roster file is read once per run. Any structural problem is a
configuration error and aborts the run before a single fetch happens.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping

from domain.models import (
    CupCategory,
    CupProgress,
    Milestone,
    Participant,
    Roster,
    RosterPlayer,
    RosterTeam,
    UefaCompetition,
)

__all__ = ["RosterError", "load_roster", "parse_roster"]


class RosterError(ValueError):
    """Raised when the roster file is missing, unreadable or malformed."""


def _parse_date(value: Any, *, where: str) -> date | None:
    if value in (None, ""):
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as e:
        raise RosterError(f"{where}: invalid active_from_date {value!r}") from e


def _parse_cup_progress(raw: Mapping[str, Any]) -> Dict[str, Dict[CupCategory, CupProgress]]:
    out: Dict[str, Dict[CupCategory, CupProgress]] = {}
    for team, declared in raw.items():
        if not isinstance(declared, Mapping):
            raise RosterError(f"cup_progress[{team!r}] must be an object")
        per_team: Dict[CupCategory, CupProgress] = {}
        domestic = declared.get("domestic")
        if domestic:
            try:
                per_team[CupCategory.DOMESTIC] = CupProgress(
                    CupCategory.DOMESTIC, Milestone(domestic)
                )
            except ValueError as e:
                raise RosterError(f"cup_progress[{team!r}].domestic: {domestic!r}") from e
        uefa = declared.get("uefa")
        if uefa:
            if not isinstance(uefa, Mapping):
                raise RosterError(f"cup_progress[{team!r}].uefa must be an object")
            try:
                per_team[CupCategory.UEFA] = CupProgress(
                    CupCategory.UEFA,
                    Milestone(uefa.get("milestone")),
                    UefaCompetition(uefa.get("competition")),
                )
            except ValueError as e:
                raise RosterError(f"cup_progress[{team!r}].uefa: {dict(uefa)!r}") from e
        unknown = set(declared) - {"domestic", "uefa"}
        if unknown:
            raise RosterError(f"cup_progress[{team!r}]: unknown keys {sorted(unknown)}")
        if per_team:
            out[team] = per_team
    return out


def parse_roster(raw: Mapping[str, Any]) -> Roster:
    meta = raw.get("pool_metadata") or {}
    season = meta.get("season")
    if season in (None, ""):
        raise RosterError("pool_metadata.season is required")
    entries = raw.get("rosters")
    if not isinstance(entries, list) or not entries:
        raise RosterError("rosters must be a non-empty list")

    participants: List[Participant] = []
    seen: set[str] = set()
    for idx, entry in enumerate(entries):
        name = (entry.get("participant") or "").strip() if isinstance(entry, Mapping) else ""
        if not name:
            raise RosterError(f"rosters[{idx}]: participant name is required")
        if name in seen:
            raise RosterError(f"rosters[{idx}]: duplicate participant {name!r}")
        seen.add(name)
        teams = tuple(
            RosterTeam(name=str(t["name"]).strip())
            for t in entry.get("teams", [])
            if t.get("name")
        )
        players = tuple(
            RosterPlayer(
                name=str(p["name"]).strip(),
                active_from_date=_parse_date(
                    p.get("active_from_date"), where=f"{name}/{p['name']}"
                ),
            )
            for p in entry.get("players", [])
            if p.get("name")
        )
        participants.append(Participant(name=name, teams=teams, players=players))

    cup_progress = _parse_cup_progress(raw.get("cup_progress") or {})
    roster = Roster(
        season=str(season),
        participants=tuple(participants),
        name=meta.get("name"),
        cup_progress=cup_progress,
    )
    unknown_teams = sorted(set(cup_progress) - set(roster.team_names()))
    if unknown_teams:
        raise RosterError(f"cup_progress names teams not on any roster: {unknown_teams}")
    return roster


def load_roster(path: str | Path) -> Roster:
    p = Path(path)
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise RosterError(f"Roster file not found: {p}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise RosterError(f"Roster file unreadable: {p}: {e}") from e
    if not isinstance(raw, Mapping):
        raise RosterError(f"Roster file must contain a JSON object: {p}")
    return parse_roster(raw)
