"""Curated alias tables for roster teams and players.

Only names listed here can be matched to a roster entity. Tables are declared
statically and validated when built: a normalised alias that points at two
different entities raises immediately instead of silently resolving to
whichever entry happens to come first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from domain.models import EntityKind
from utils.naming import normalize_name

__all__ = [
    "EntityAlias",
    "AliasTable",
    "AliasConflictError",
    "TEAM_ALIASES",
    "PLAYER_ALIASES",
]


class AliasConflictError(ValueError):
    """Raised when two entities claim the same normalised alias."""


@dataclass(frozen=True, slots=True)
class EntityAlias:
    canonical: str
    aliases: Tuple[str, ...] = ()

    def all_names(self) -> Tuple[str, ...]:
        # Canonical name always participates in matching
        return (self.canonical, *self.aliases)


class AliasTable:
    """Ordered, validated alias lookup for one entity kind."""

    def __init__(self, kind: EntityKind, entries: Iterable[EntityAlias]):
        self.kind = kind
        self._entries: List[EntityAlias] = []
        # entry order preserved; each item is (canonical, [normalised aliases])
        self._normalized: List[Tuple[str, Tuple[str, ...]]] = []
        self._exact: Dict[str, str] = {}
        for entry in entries:
            self._add(entry)

    def _add(self, entry: EntityAlias) -> None:
        if any(e.canonical == entry.canonical for e in self._entries):
            raise AliasConflictError(f"Duplicate {self.kind.value} entry: {entry.canonical!r}")
        keys: List[str] = []
        for name in entry.all_names():
            key = normalize_name(name)
            if not key:
                raise AliasConflictError(
                    f"Alias {name!r} for {entry.canonical!r} normalises to an empty key"
                )
            owner = self._exact.get(key)
            if owner is not None and owner != entry.canonical:
                raise AliasConflictError(
                    f"Alias {name!r} claimed by both {owner!r} and {entry.canonical!r}"
                )
            self._exact[key] = entry.canonical
            if key not in keys:
                keys.append(key)
        self._entries.append(entry)
        self._normalized.append((entry.canonical, tuple(keys)))

    def __contains__(self, canonical: object) -> bool:
        return any(e.canonical == canonical for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def canonical_names(self) -> List[str]:
        return [e.canonical for e in self._entries]

    def exact(self, normalized: str) -> str | None:
        return self._exact.get(normalized)

    def normalized_entries(self) -> List[Tuple[str, Tuple[str, ...]]]:
        return list(self._normalized)

    def missing(self, roster_names: Iterable[str]) -> List[str]:
        """Roster names with no alias entry (matching falls back to the bare name)."""
        return [n for n in roster_names if n not in self]

    def restrict(self, roster_names: Iterable[str]) -> "AliasTable":
        """Table limited to ``roster_names``, in declaration order.

        Unknown names are appended as bare canonical entries.
        """
        wanted = list(dict.fromkeys(roster_names))
        wanted_set = set(wanted)
        kept = [e for e in self._entries if e.canonical in wanted_set]
        extra = [EntityAlias(n) for n in wanted if n not in self]
        return AliasTable(self.kind, kept + extra)


TEAM_ALIASES = AliasTable(
    EntityKind.TEAM,
    [
        EntityAlias("Manchester City", ("Man City",)),
        EntityAlias("Atletico Madrid", ("Atlético Madrid", "Atlético de Madrid")),
        EntityAlias("Benfica", ("SL Benfica", "S.L. Benfica")),
        EntityAlias("Ajax", ("AFC Ajax",)),
        EntityAlias("Feyenoord"),
        EntityAlias("Fiorentina", ("ACF Fiorentina",)),
        EntityAlias("Bayern Munich", ("Bayern München", "FC Bayern Munich")),
        EntityAlias("Liverpool"),
        EntityAlias("Borussia Dortmund", ("Dortmund",)),
        EntityAlias("Sporting CP", ("Sporting",)),
        EntityAlias("Atalanta", ("Atalanta BC",)),
        EntityAlias("Lyon", ("Olympique Lyonnais",)),
        EntityAlias("Arsenal"),
        EntityAlias("Chelsea"),
        EntityAlias("Celtic"),
        EntityAlias("Fenerbahce", ("Fenerbahçe",)),
        EntityAlias("Slavia Praha", ("Slavia Prague", "SK Slavia Prague")),
        EntityAlias("AS Monaco", ("Monaco",)),
        EntityAlias("Real Madrid"),
        EntityAlias(
            "Inter Milan", ("Internazionale", "Inter", "FC Internazionale Milano")
        ),
        EntityAlias("Red Star Belgrade", ("Crvena Zvezda", "Red Star")),
        EntityAlias("Olympiacos", ("Olympiakos", "Olympiacos F.C.")),
        EntityAlias("Sparta Praha", ("Sparta Prague", "AC Sparta Prague")),
        EntityAlias(
            "Union SG",
            (
                "Royale Union Saint-Gilloise",
                "Union Saint-Gilloise",
                "Union St.-Gilloise",
                "R. Union SG",
            ),
        ),
        EntityAlias("PSG", ("Paris Saint-Germain", "Paris S-G")),
        EntityAlias("Napoli", ("S.S.C. Napoli", "SSC Napoli")),
        EntityAlias("FC Porto", ("Porto",)),
        EntityAlias("Bayer Leverkusen", ("Bayer 04 Leverkusen", "Leverkusen")),
        EntityAlias("Rangers", ("Rangers F.C.",)),
        EntityAlias("Ipswich Town", ("Ipswich",)),
        EntityAlias("Barcelona", ("FC Barcelona",)),
        EntityAlias("Galatasaray"),
        EntityAlias("PSV Eindhoven", ("PSV",)),
        EntityAlias("Aston Villa"),
        EntityAlias("AS Roma", ("Roma", "A.S. Roma")),
        EntityAlias("Strasbourg", ("RC Strasbourg Alsace", "RC Strasbourg")),
    ],
)

PLAYER_ALIASES = AliasTable(
    EntityKind.PLAYER,
    [
        EntityAlias("Kylian Mbappe", ("Kylian Mbappé", "Mbappé")),
        EntityAlias("Alexander Isak"),
        EntityAlias("Serhou Guirassy"),
        EntityAlias("Jhon Duran", ("Jhon Durán",)),
        EntityAlias("Rasmus Højlund", ("Rasmus Hojlund",)),
        EntityAlias("Mika Biereth"),
        EntityAlias("Erling Haaland"),
        EntityAlias("Bukayo Saka"),
        EntityAlias("Bradley Barcola"),
        EntityAlias("Julian Alvarez", ("Julián Álvarez", "Julian Álvarez")),
        EntityAlias("Jonathan David"),
        EntityAlias("Victor Aghehowa"),
        EntityAlias("Viktor Gyökeres", ("Viktor Gyokeres",)),
        EntityAlias("Raphinha"),
        EntityAlias("Lamine Yamal"),
        EntityAlias("Michael Olise"),
        EntityAlias("Cody Gakpo"),
        EntityAlias("Desire Doue", ("Désiré Doué", "Desiré Doué")),
        EntityAlias("Robert Lewandowski"),
        EntityAlias("Ousmane Dembele", ("Ousmane Dembélé",)),
        EntityAlias("Vangelis Pavlidis", ("Evangelos Pavlidis",)),
        EntityAlias("Alexander Sorloth", ("Alexander Sørloth",)),
        EntityAlias("Moise Kean"),
        EntityAlias("Ollie Watkins"),
        EntityAlias("Mohamed Salah"),
        EntityAlias("Victor Osimhen"),
        EntityAlias("Vinícius Júnior", ("Vinicius Junior", "Vinícius Jr.")),
        EntityAlias("Cole Palmer"),
        EntityAlias("Lois Openda", ("Loïs Openda",)),
        EntityAlias("Dusan Vlahovic", ("Dušan Vlahović",)),
        EntityAlias("Harry Kane"),
        EntityAlias("Lautaro Martinez", ("Lautaro Martínez",)),
        EntityAlias("Omar Marmoush"),
        EntityAlias("Hugo Ekitike"),
        EntityAlias("Alassane Plea", ("Alassane Pléa",)),
        EntityAlias("Emanuel Emegha"),
    ],
)
