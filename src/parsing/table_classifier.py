"""Shape classification of source tables (BeautifulSoup).

Source pages carry many tables, most of them irrelevant to scoring. Each
candidate table is reduced to rows of ``Cell`` values and tagged with a
``TableShape`` by an ordered list of matchers; the first matcher that accepts
the table decides its shape.

Header row resolution: when the first row has at most two header cells it is
treated as a spanning title row and headers are re-read from the second row,
keeping whichever row produced more header cells.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from parsing.headers import (
    GOALS_HEADER_RE,
    NAME_HEADER_RE,
    POINTS_HEADER_RE,
    RANK_HEADER_RE,
    TEAM_HEADER_RE,
    find_total_column,
)
from utils import html_utils

log = logging.getLogger(__name__)

__all__ = [
    "Cell",
    "RawTable",
    "TableShape",
    "HeaderSignature",
    "ClassifiedTable",
    "extract_tables",
    "resolve_headers",
    "classify_table",
    "classify_document",
    "MATCHERS",
]

# Elements that only exist for sorting / citation and pollute cell text
_NOISE_SELECTOR = 'sup.reference, span.sortkey, [style*="display:none"], [style*="display: none"]'

TITLE_ROW_MAX_HEADERS = 2


class TableShape(str, Enum):
    STANDINGS = "standings"
    RANKED_SCORER = "ranked-scorer"
    SQUAD_APPEARANCES = "squad-appearances"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class Cell:
    text: str
    is_header: bool = False
    links: Tuple[str, ...] = ()

    @property
    def first_link_text(self) -> str:
        return self.links[0] if self.links else ""

    @property
    def last_link_text(self) -> str:
        return self.links[-1] if self.links else ""


@dataclass(frozen=True, slots=True)
class RawTable:
    index: int
    rows: Tuple[Tuple[Cell, ...], ...]

    def header_texts(self, row_index: int) -> List[str]:
        if row_index >= len(self.rows):
            return []
        return [html_utils.clean_header(c.text) for c in self.rows[row_index] if c.is_header]

    def row_text(self, row_index: int) -> str:
        if row_index >= len(self.rows):
            return ""
        return " ".join(c.text for c in self.rows[row_index])


@dataclass(frozen=True, slots=True)
class HeaderSignature:
    headers: Tuple[str, ...]
    sub_header_text: str
    has_name: bool
    has_team: bool
    has_points: bool
    has_rank: bool
    has_total: bool
    has_goals: bool

    @classmethod
    def from_headers(cls, headers: Sequence[str], sub_header_text: str = "") -> "HeaderSignature":
        return cls(
            headers=tuple(headers),
            sub_header_text=sub_header_text,
            has_name=any(NAME_HEADER_RE.match(h) for h in headers),
            has_team=any(TEAM_HEADER_RE.match(h) for h in headers),
            has_points=any(POINTS_HEADER_RE.match(h) for h in headers),
            has_rank=any(RANK_HEADER_RE.match(h) for h in headers),
            has_total=find_total_column(headers) >= 0,
            has_goals=any(GOALS_HEADER_RE.match(h) for h in headers),
        )

    @property
    def eligible(self) -> bool:
        # Standings tables name their entity column "Team"/"Club" rather than "Player"/"Name"
        return self.has_name or (self.has_team and self.has_points)

    @property
    def has_apps_goals_sub_header(self) -> bool:
        text = self.sub_header_text.lower()
        return "apps" in text and "goals" in text


@dataclass(frozen=True, slots=True)
class ClassifiedTable:
    shape: TableShape
    headers: Tuple[str, ...]
    header_row_index: int
    table: RawTable
    signature: Optional[HeaderSignature] = field(default=None, compare=False)

    @property
    def first_data_row(self) -> int:
        # Squad tables carry an Apps|Goals sub-header row below the headers
        extra = 1 if self.shape is TableShape.SQUAD_APPEARANCES else 0
        return self.header_row_index + 1 + extra

    @property
    def data_rows(self) -> Tuple[Tuple[Cell, ...], ...]:
        return self.table.rows[self.first_data_row :]


Matcher = Callable[[HeaderSignature], bool]

# Evaluated in order; the first accepting matcher decides the shape.
MATCHERS: List[Tuple[TableShape, Matcher]] = [
    (TableShape.UNRECOGNIZED, lambda s: not s.eligible),
    (TableShape.STANDINGS, lambda s: s.has_points),
    (TableShape.RANKED_SCORER, lambda s: s.has_rank and (s.has_total or s.has_goals)),
    (
        TableShape.SQUAD_APPEARANCES,
        lambda s: not s.has_rank and s.has_apps_goals_sub_header,
    ),
]


def _cell_from_tag(tag: Tag) -> Cell:
    links = tuple(
        t
        for t in (html_utils.clean_cell(a.get_text(" ", strip=True)) for a in tag.find_all("a"))
        if t
    )
    return Cell(
        text=html_utils.clean_cell(tag.get_text(" ", strip=True)),
        is_header=tag.name == "th",
        links=links,
    )


def _table_to_raw(table: Tag, index: int) -> RawTable:
    rows: List[Tuple[Cell, ...]] = []
    for tr in table.find_all("tr"):
        # Skip rows that belong to a nested table
        if tr.find_parent("table") is not table:
            continue
        cells = tuple(_cell_from_tag(c) for c in tr.find_all(["th", "td"], recursive=False))
        rows.append(cells)
    return RawTable(index=index, rows=tuple(rows))


def extract_tables(html: str | BeautifulSoup) -> List[RawTable]:
    """Candidate tabular blocks of a document.

    ``table.wikitable`` elements when the document has any, otherwise every
    top-level ``table``.
    """
    soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "html.parser")
    for noise in soup.select(_NOISE_SELECTOR):
        noise.decompose()
    tables = soup.find_all("table", class_="wikitable")
    if not tables:
        tables = [t for t in soup.find_all("table") if t.find_parent("table") is None]
    return [_table_to_raw(t, idx) for idx, t in enumerate(tables)]


def resolve_headers(table: RawTable) -> Tuple[List[str], int]:
    headers = table.header_texts(0)
    header_row_index = 0
    if len(headers) <= TITLE_ROW_MAX_HEADERS:
        second = table.header_texts(1)
        if len(second) > len(headers):
            headers = second
            header_row_index = 1
    return headers, header_row_index


def classify_table(table: RawTable) -> ClassifiedTable:
    headers, header_row_index = resolve_headers(table)
    signature = HeaderSignature.from_headers(headers, table.row_text(header_row_index + 1))
    shape = TableShape.UNRECOGNIZED
    for candidate, matcher in MATCHERS:
        if matcher(signature):
            shape = candidate
            break
    if shape is TableShape.UNRECOGNIZED:
        log.debug("table %d unrecognized (headers=%s)", table.index, headers)
    return ClassifiedTable(
        shape=shape,
        headers=tuple(headers),
        header_row_index=header_row_index,
        table=table,
        signature=signature,
    )


def classify_document(html: str | BeautifulSoup) -> List[ClassifiedTable]:
    return [classify_table(t) for t in extract_tables(html)]
