"""Parsing of goalscorer tables (BeautifulSoup).

Two page kinds are handled:

* competition pages (league / UEFA): one ranked "top scorers" table,
  read by :func:`parse_top_scorers`;
* club season pages: a dedicated ranked goalscorer table and/or a squad
  appearances table with Apps|Goals pairs, read by
  :func:`parse_team_goalscorers`. Ranked tables are read first and the first
  table to list a player wins, so a player appearing in both tables of the
  same page is counted once.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from bs4 import BeautifulSoup

from parsing.column_locator import LocatedRow, locate_rows
from parsing.errors import ParsingError
from parsing.table_classifier import ClassifiedTable, TableShape, classify_document
from utils.naming import normalize_name

log = logging.getLogger(__name__)

SCORER_SHAPES = (TableShape.RANKED_SCORER, TableShape.SQUAD_APPEARANCES)


def _safe_rows(table: ClassifiedTable) -> List[LocatedRow]:
    try:
        return locate_rows(table)
    except ParsingError as e:
        log.debug("%s table %d skipped: %s", table.shape.value, table.table.index, e)
        return []


def parse_top_scorers(html: str | BeautifulSoup) -> Dict[str, int]:
    """``{player display name: goals}`` from the first ranked scorer table that yields rows.

    A name listed twice in that table has its values summed.
    """
    for table in classify_document(html):
        if table.shape is not TableShape.RANKED_SCORER:
            continue
        scorers: Dict[str, int] = {}
        for row in _safe_rows(table):
            scorers[row.name] = scorers.get(row.name, 0) + row.value
        if scorers:
            return scorers
    return {}


def _all_targets_found(found: Iterable[str], targets: List[str]) -> bool:
    keys = [normalize_name(n) for n in found]
    return all(any(t in k or k in t for k in keys if k) for t in targets)


def parse_team_goalscorers(
    html: str | BeautifulSoup, target_names: Optional[Iterable[str]] = None
) -> Dict[str, int]:
    """``{player display name: season goals}`` from a club season page.

    When ``target_names`` is given, reading stops as soon as every target has
    a (normalised, loose) match among the collected names.
    """
    targets = [normalize_name(n) for n in (target_names or []) if normalize_name(n)]
    candidates = [t for t in classify_document(html) if t.shape in SCORER_SHAPES]
    # Dedicated goalscorer tables first; sort is stable so document order is kept
    candidates.sort(key=lambda t: 0 if t.shape is TableShape.RANKED_SCORER else 1)

    scorers: Dict[str, int] = {}
    for table in candidates:
        rows = _safe_rows(table)
        for row in rows:
            if row.name in scorers:
                continue
            if row.best_effort:
                log.info(
                    "%s: %d goals summed from per-competition cells (best effort)",
                    row.name,
                    row.value,
                )
            scorers[row.name] = row.value
        if targets and _all_targets_found(scorers, targets):
            break
    return scorers
