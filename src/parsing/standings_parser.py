"""Parsing of league / competition standings tables (BeautifulSoup)."""

from __future__ import annotations

import logging
from typing import Dict

from bs4 import BeautifulSoup

from parsing.column_locator import locate_standings
from parsing.errors import ParsingError
from parsing.table_classifier import TableShape, classify_document

log = logging.getLogger(__name__)

# A page can carry several small Pts tables (group stages, form guides);
# once a table this large has been read the main standings are assumed found.
COMPLETE_TABLE_MIN_TEAMS = 5


def parse_standings(html: str | BeautifulSoup) -> Dict[str, int]:
    """Return ``{team display name: points}`` from the standings tables of a page.

    Tables are read in document order until one yields more than
    ``COMPLETE_TABLE_MIN_TEAMS`` teams. A team listed twice keeps the later value.
    """
    standings: Dict[str, int] = {}
    for table in classify_document(html):
        if table.shape is not TableShape.STANDINGS:
            continue
        try:
            rows = locate_standings(table)
        except ParsingError as e:
            log.debug("standings table %d skipped: %s", table.table.index, e)
            continue
        for row in rows:
            standings[row.name] = row.value
        if len(standings) > COMPLETE_TABLE_MIN_TEAMS:
            break
    return standings
