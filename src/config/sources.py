"""Source page map: which documents are fetched, in which fixed order.

Order matters. League pages are processed first, then UEFA competition pages,
then club season pages for players still missing after the first two phases.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

WIKI_BASE = "https://en.wikipedia.org/wiki/"

KIND_LEAGUE = "league"
KIND_UEFA = "uefa"
KIND_CLUB = "club"


@dataclass(frozen=True, slots=True)
class SourcePage:
    name: str
    url: str
    kind: str
    competition: Optional[str] = None


def _wiki(slug: str) -> str:
    return WIKI_BASE + slug


LEAGUE_PAGES: List[SourcePage] = [
    SourcePage("Premier League", _wiki("2025%E2%80%9326_Premier_League"), KIND_LEAGUE),
    SourcePage("La Liga", _wiki("2025%E2%80%9326_La_Liga"), KIND_LEAGUE),
    SourcePage("Bundesliga", _wiki("2025%E2%80%9326_Bundesliga"), KIND_LEAGUE),
    SourcePage("Serie A", _wiki("2025%E2%80%9326_Serie_A"), KIND_LEAGUE),
    SourcePage("Ligue 1", _wiki("2025%E2%80%9326_Ligue_1"), KIND_LEAGUE),
    SourcePage("Eredivisie", _wiki("2025%E2%80%9326_Eredivisie"), KIND_LEAGUE),
    SourcePage("Primeira Liga", _wiki("2025%E2%80%9326_Primeira_Liga"), KIND_LEAGUE),
    SourcePage(
        "Scottish Premiership", _wiki("2025%E2%80%9326_Scottish_Premiership"), KIND_LEAGUE
    ),
    SourcePage("Süper Lig", _wiki("2025%E2%80%9326_S%C3%BCper_Lig"), KIND_LEAGUE),
    SourcePage("Belgian Pro League", _wiki("2025%E2%80%9326_Belgian_Pro_League"), KIND_LEAGUE),
    SourcePage("Czech First League", _wiki("2025%E2%80%9326_Czech_First_League"), KIND_LEAGUE),
    SourcePage("Serbian SuperLiga", _wiki("2025%E2%80%9326_Serbian_SuperLiga"), KIND_LEAGUE),
    SourcePage("Greek Super League", _wiki("2025%E2%80%9326_Super_League_Greece"), KIND_LEAGUE),
]

UEFA_PAGES: List[SourcePage] = [
    SourcePage(
        "Champions League",
        _wiki("2025%E2%80%9326_UEFA_Champions_League"),
        KIND_UEFA,
        competition="champions_league",
    ),
    SourcePage(
        "Europa League",
        _wiki("2025%E2%80%9326_UEFA_Europa_League"),
        KIND_UEFA,
        competition="europa_league",
    ),
    SourcePage(
        "Conference League",
        _wiki("2025%E2%80%9326_UEFA_Conference_League"),
        KIND_UEFA,
        competition="conference_league",
    ),
]

# Club season pages, keyed by roster player canonical name. Several players
# may share one page; the pipeline fetches each URL once.
PLAYER_SEASON_PAGES: Dict[str, str] = {
    "Kylian Mbappe": _wiki("2025%E2%80%9326_Real_Madrid_CF_season"),
    "Alexander Isak": _wiki("2025%E2%80%9326_Liverpool_F.C._season"),
    "Serhou Guirassy": _wiki("2025%E2%80%9326_Borussia_Dortmund_season"),
    "Rasmus Højlund": _wiki("2025%E2%80%9326_SSC_Napoli_season"),
    "Mika Biereth": _wiki("2025%E2%80%9326_AS_Monaco_FC_season"),
    "Erling Haaland": _wiki("2025%E2%80%9326_Manchester_City_F.C._season"),
    "Bukayo Saka": _wiki("2025%E2%80%9326_Arsenal_F.C._season"),
    "Bradley Barcola": _wiki("2025%E2%80%9326_Paris_Saint-Germain_FC_season"),
    "Julian Alvarez": _wiki("2025%E2%80%9326_Atl%C3%A9tico_Madrid_season"),
    "Jonathan David": _wiki("2025%E2%80%9326_Juventus_FC_season"),
    "Viktor Gyökeres": _wiki("2025%E2%80%9326_Arsenal_F.C._season"),
    "Raphinha": _wiki("2025%E2%80%9326_FC_Barcelona_season"),
    "Lamine Yamal": _wiki("2025%E2%80%9326_FC_Barcelona_season"),
    "Michael Olise": _wiki("2025%E2%80%9326_FC_Bayern_Munich_season"),
    "Cody Gakpo": _wiki("2025%E2%80%9326_Liverpool_F.C._season"),
    "Desire Doue": _wiki("2025%E2%80%9326_Paris_Saint-Germain_FC_season"),
    "Robert Lewandowski": _wiki("2025%E2%80%9326_FC_Barcelona_season"),
    "Ousmane Dembele": _wiki("2025%E2%80%9326_Paris_Saint-Germain_FC_season"),
    "Vangelis Pavlidis": _wiki("2025%E2%80%9326_SL_Benfica_season"),
    "Alexander Sorloth": _wiki("2025%E2%80%9326_Atl%C3%A9tico_Madrid_season"),
    "Moise Kean": _wiki("2025%E2%80%9326_ACF_Fiorentina_season"),
    "Ollie Watkins": _wiki("2025%E2%80%9326_Aston_Villa_F.C._season"),
    "Mohamed Salah": _wiki("2025%E2%80%9326_Liverpool_F.C._season"),
    "Victor Osimhen": _wiki("2025%E2%80%9326_Galatasaray_S.K._season"),
    "Vinícius Júnior": _wiki("2025%E2%80%9326_Real_Madrid_CF_season"),
    "Cole Palmer": _wiki("2025%E2%80%9326_Chelsea_F.C._season"),
    "Lois Openda": _wiki("2025%E2%80%9326_RB_Leipzig_season"),
    "Dusan Vlahovic": _wiki("2025%E2%80%9326_Juventus_FC_season"),
    "Harry Kane": _wiki("2025%E2%80%9326_FC_Bayern_Munich_season"),
    "Lautaro Martinez": _wiki("2025%E2%80%9326_Inter_Milan_season"),
    "Omar Marmoush": _wiki("2025%E2%80%9326_Manchester_City_F.C._season"),
    "Hugo Ekitike": _wiki("2025%E2%80%9326_Liverpool_F.C._season"),
    "Alassane Plea": _wiki("2025%E2%80%9326_PSV_Eindhoven_season"),
    "Emanuel Emegha": _wiki("2025%E2%80%9326_RC_Strasbourg_Alsace_season"),
}


def club_pages_for(players: List[str]) -> Dict[str, List[str]]:
    """Group players by season page URL (each URL fetched once), preserving order."""
    grouped: Dict[str, List[str]] = {}
    for name in players:
        url = PLAYER_SEASON_PAGES.get(name)
        if url:
            grouped.setdefault(url, []).append(name)
    return grouped
