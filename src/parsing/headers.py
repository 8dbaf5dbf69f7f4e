"""Header vocabulary shared by the classifier and the column locator."""

from __future__ import annotations

import re
from typing import Pattern, Sequence

NAME_HEADER_RE = re.compile(r"^(player|name)$", re.IGNORECASE)
TEAM_HEADER_RE = re.compile(r"^(team|club)$", re.IGNORECASE)
POINTS_HEADER_RE = re.compile(r"^pts\.?$", re.IGNORECASE)
RANK_HEADER_RE = re.compile(r"^(rank|rk\.?|#)$", re.IGNORECASE)
GOALS_HEADER_RE = re.compile(r"^(goals|gls)$", re.IGNORECASE)
SEASON_TOTAL_RE = re.compile(r"^season total$", re.IGNORECASE)
CAREER_TOTAL_RE = re.compile(r"^career club total$", re.IGNORECASE)

# First-cell labels of rows that summarise a table instead of naming an entity
AGGREGATE_ROW_LABELS = frozenset(
    {"Total", "Totals", "Goalkeepers", "Defenders", "Midfielders", "Forwards"}
)


def find_header(headers: Sequence[str], pattern: Pattern[str]) -> int:
    for idx, h in enumerate(headers):
        if pattern.match(h):
            return idx
    return -1


def find_total_column(headers: Sequence[str]) -> int:
    """Index of the total column: ``Total``, else ``Season total``, else ``Career club total``."""
    if "Total" in headers:
        return list(headers).index("Total")
    for pattern in (SEASON_TOTAL_RE, CAREER_TOTAL_RE):
        idx = find_header(headers, pattern)
        if idx >= 0:
            return idx
    return -1


def find_name_column(headers: Sequence[str]) -> int:
    return find_header(headers, NAME_HEADER_RE)


def find_team_column(headers: Sequence[str]) -> int:
    return find_header(headers, TEAM_HEADER_RE)


def find_points_column(headers: Sequence[str]) -> int:
    return find_header(headers, POINTS_HEADER_RE)


def find_goals_column(headers: Sequence[str]) -> int:
    return find_header(headers, GOALS_HEADER_RE)
