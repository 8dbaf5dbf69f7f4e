"""Mapping free-text source names onto roster entities."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from domain.aliases import AliasTable, PLAYER_ALIASES, TEAM_ALIASES
from domain.models import EntityKind
from utils import html_utils
from utils.naming import normalize_name, strip_team_markers

log = logging.getLogger(__name__)

# Aliases this short are too ambiguous for substring matching ("Inter", "Roma")
MIN_SUBSTRING_ALIAS_LENGTH = 4


def clean_team_name(raw: str) -> str:
    return strip_team_markers(html_utils.clean_header(raw))


class EntityResolver:
    """Resolve display names against closed alias tables.

    Exact normalised match first; for teams only, a substring match against
    aliases longer than ``MIN_SUBSTRING_ALIAS_LENGTH``: the source name may
    contain the alias, or be its leading words. Declaration order decides
    between several candidates.
    """

    def __init__(
        self,
        teams: AliasTable | None = None,
        players: AliasTable | None = None,
    ):
        self._tables: Dict[EntityKind, AliasTable] = {
            EntityKind.TEAM: teams if teams is not None else TEAM_ALIASES,
            EntityKind.PLAYER: players if players is not None else PLAYER_ALIASES,
        }

    @classmethod
    def for_roster(cls, team_names: Iterable[str], player_names: Iterable[str]) -> "EntityResolver":
        """Resolver limited to the roster's entities.

        Roster names without a curated alias entry are still matchable by their
        exact name; they are reported once so the alias table can be extended.
        """
        team_names = list(team_names)
        player_names = list(player_names)
        for name in TEAM_ALIASES.missing(team_names):
            log.warning("No team alias entry for roster name %r; exact name only", name)
        for name in PLAYER_ALIASES.missing(player_names):
            log.warning("No player alias entry for roster name %r; exact name only", name)
        return cls(
            teams=TEAM_ALIASES.restrict(team_names),
            players=PLAYER_ALIASES.restrict(player_names),
        )

    def table(self, kind: EntityKind) -> AliasTable:
        return self._tables[kind]

    def resolve(self, raw: str, kind: EntityKind) -> Optional[str]:
        text = clean_team_name(raw) if kind is EntityKind.TEAM else raw
        key = normalize_name(text)
        if not key:
            return None
        table = self._tables[kind]
        hit = table.exact(key)
        if hit is not None:
            return hit
        if kind is not EntityKind.TEAM:
            return None
        long_key = len(key) > MIN_SUBSTRING_ALIAS_LENGTH
        for canonical, aliases in table.normalized_entries():
            for alias in aliases:
                if len(alias) <= MIN_SUBSTRING_ALIAS_LENGTH:
                    continue
                # A shortened source name must lead the alias: "sporting" -> "sporting cp",
                # never "milan" -> "inter milan"
                if alias in key or (long_key and alias.startswith(key + " ")):
                    return canonical
        return None

    def resolve_team(self, raw: str) -> Optional[str]:
        return self.resolve(raw, EntityKind.TEAM)

    def resolve_player(self, raw: str) -> Optional[str]:
        return self.resolve(raw, EntityKind.PLAYER)
