"""API-Football identifiers for the credentialed source variant."""

from __future__ import annotations

from typing import Dict

# league id -> display name; domestic leagues first, UEFA competitions last
DOMESTIC_LEAGUES: Dict[int, str] = {
    39: "Premier League",
    140: "La Liga",
    78: "Bundesliga",
    135: "Serie A",
    61: "Ligue 1",
    94: "Primeira Liga",
    88: "Eredivisie",
    179: "Scottish Premiership",
    203: "Süper Lig",
    144: "Belgian Pro League",
    345: "Czech First League",
    286: "Serbian SuperLiga",
    197: "Super League Greece",
}

# league id -> competition key
UEFA_LEAGUES: Dict[int, str] = {
    2: "champions_league",
    3: "europa_league",
    848: "conference_league",
}

# roster team canonical name -> API team id
TEAM_IDS: Dict[str, int] = {
    "Manchester City": 50,
    "Atletico Madrid": 530,
    "Benfica": 211,
    "Ajax": 194,
    "Feyenoord": 209,
    "Fiorentina": 502,
    "Bayern Munich": 157,
    "Liverpool": 40,
    "Borussia Dortmund": 165,
    "Sporting CP": 228,
    "Atalanta": 499,
    "Lyon": 80,
    "Arsenal": 42,
    "Chelsea": 49,
    "Celtic": 247,
    "Fenerbahce": 611,
    "Slavia Praha": 553,
    "AS Monaco": 91,
    "Real Madrid": 541,
    "Inter Milan": 505,
    "Red Star Belgrade": 598,
    "Olympiacos": 568,
    "Sparta Praha": 558,
    "Union SG": 740,
    "PSG": 85,
    "Napoli": 492,
    "FC Porto": 212,
    "Bayer Leverkusen": 168,
    "Rangers": 257,
    "Ipswich Town": 57,
    "Barcelona": 529,
    "Galatasaray": 645,
    "PSV Eindhoven": 197,
    "Aston Villa": 66,
    "AS Roma": 497,
    "Strasbourg": 95,
}

# roster player canonical name -> API player id
PLAYER_IDS: Dict[str, int] = {
    "Kylian Mbappe": 278,
    "Alexander Isak": 903,
    "Serhou Guirassy": 21393,
    "Jhon Duran": 337092,
    "Rasmus Højlund": 303894,
    "Mika Biereth": 283026,
    "Erling Haaland": 1100,
    "Bukayo Saka": 1460,
    "Bradley Barcola": 161904,
    "Julian Alvarez": 6009,
    "Jonathan David": 8489,
    "Victor Aghehowa": 407897,
    "Viktor Gyökeres": 18979,
    "Raphinha": 1496,
    "Lamine Yamal": 386828,
    "Michael Olise": 19617,
    "Cody Gakpo": 247,
    "Desire Doue": 343027,
    "Robert Lewandowski": 521,
    "Ousmane Dembele": 153,
    "Vangelis Pavlidis": 48808,
    "Alexander Sorloth": 8492,
    "Moise Kean": 877,
    "Ollie Watkins": 19366,
    "Mohamed Salah": 306,
    "Victor Osimhen": 2780,
    "Vinícius Júnior": 762,
    "Cole Palmer": 152982,
    "Lois Openda": 86,
    "Dusan Vlahovic": 30415,
    "Harry Kane": 184,
    "Lautaro Martinez": 217,
    "Omar Marmoush": 132874,
    "Hugo Ekitike": 303523,
    "Alassane Plea": 2034,
    "Emanuel Emegha": 203762,
}
