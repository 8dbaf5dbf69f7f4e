"""Column location for classified tables.

Source tables are noisy: tied ranks collapse a leading cell through row
spans, squad tables split every competition header into an Apps|Goals pair,
and summary rows sit between player rows. The locator maps each data row to
an entity name and one numeric value (points or goals), or drops the row.

All index arithmetic goes through :func:`physical_index` so its edge cases can
be tested without any HTML.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from parsing.errors import MissingColumnError, UnrecognizedTableError
from parsing.headers import (
    AGGREGATE_ROW_LABELS,
    find_goals_column,
    find_name_column,
    find_points_column,
    find_team_column,
    find_total_column,
)
from parsing.table_classifier import Cell, ClassifiedTable, TableShape
from utils import html_utils

log = logging.getLogger(__name__)

__all__ = [
    "LocatedRow",
    "physical_index",
    "locate_rows",
    "locate_standings",
    "locate_ranked_scorers",
    "locate_squad_goals",
]

MIN_RANKED_ROW_CELLS = 2
MIN_SQUAD_ROW_CELLS = 5
# Header rows repeated inside a standings body carry several <th> cells
MAX_HEADER_CELLS_IN_DATA_ROW = 2
# Apps|Goals pairs roughly double the cell count of an inflated row
INFLATION_RATIO = 1.5
APPS_SUB_COLUMN = 0
GOALS_SUB_COLUMN = 1


@dataclass(frozen=True, slots=True)
class LocatedRow:
    name: str
    value: int
    row_index: int
    # True when the value came from the odd-cell summation fallback
    best_effort: bool = False


def physical_index(
    header_count: int,
    row_cell_count: int,
    logical_index: int,
    info_columns: Optional[int] = None,
    *,
    sub_column: int = 0,
) -> Optional[int]:
    """Map a header (logical) index to a cell (physical) index within one row.

    Offset mode (``info_columns`` is None): rows that lost leading cells to a
    row span are shifted by ``max(0, header_count - row_cell_count)`` and the
    result is clamped into the row.

    Inflation mode: the first ``info_columns`` headers map 1:1, every later
    header owns two cells; ``sub_column`` picks apps (0) or goals (1).
    Returns None when the cell does not exist in the row.
    """
    if row_cell_count <= 0 or logical_index < 0:
        return None
    if info_columns is None:
        offset = max(0, header_count - row_cell_count)
        return min(max(0, logical_index - offset), row_cell_count - 1)
    if logical_index < info_columns:
        return logical_index if logical_index < row_cell_count else None
    idx = info_columns + (logical_index - info_columns) * 2 + sub_column
    return idx if idx < row_cell_count else None


def _entity_name(cell: Cell, *, prefer_last_link: bool = False) -> str:
    link = cell.last_link_text if prefer_last_link else cell.first_link_text
    return html_utils.clean_entity_name(link or cell.text)


def _is_aggregate_row(cells: Sequence[Cell]) -> bool:
    return bool(cells) and cells[0].text.strip() in AGGREGATE_ROW_LABELS


def _require(index: int, column: str, table: ClassifiedTable) -> int:
    if index < 0:
        raise MissingColumnError(
            f"{table.shape.value} table {table.table.index} has no {column} column",
            context={"headers": list(table.headers), "table_index": table.table.index},
        )
    return index


def locate_standings(table: ClassifiedTable) -> List[LocatedRow]:
    headers = table.headers
    team_idx = find_team_column(headers)
    if team_idx < 0:
        team_idx = find_name_column(headers)
    if team_idx < 0:
        team_idx = 1
    pts_idx = _require(find_points_column(headers), "Pts", table)

    located: List[LocatedRow] = []
    for offset, cells in enumerate(table.data_rows):
        if sum(1 for c in cells if c.is_header) > MAX_HEADER_CELLS_IN_DATA_ROW:
            continue
        # Trailing spanned cells (qualification notes) shorten rows at the end,
        # so standings cells are indexed directly.
        if pts_idx >= len(cells) or team_idx >= len(cells):
            continue
        name = _entity_name(cells[team_idx], prefer_last_link=True)
        points = html_utils.extract_int(cells[pts_idx].text)
        if name and points is not None:
            located.append(LocatedRow(name, points, table.first_data_row + offset))
    return located


def _is_inflated(header_count: int, first_row_cells: int) -> bool:
    return first_row_cells > header_count * INFLATION_RATIO


def locate_ranked_scorers(
    table: ClassifiedTable, *, first_row: Optional[int] = None
) -> List[LocatedRow]:
    headers = table.headers
    name_idx = _require(find_name_column(headers), "Player/Name", table)
    value_idx = find_total_column(headers)
    if value_idx < 0:
        value_idx = find_goals_column(headers)
    value_idx = _require(value_idx, "Total/Goals", table)

    start = table.header_row_index + 1 if first_row is None else first_row
    rows = table.table.rows[start:]
    header_count = len(headers)
    inflated = bool(rows) and _is_inflated(header_count, len(rows[0]))
    info_columns = name_idx + 1

    located: List[LocatedRow] = []
    last_value: Optional[int] = None
    for offset, cells in enumerate(rows):
        if len(cells) < MIN_RANKED_ROW_CELLS or _is_aggregate_row(cells):
            continue
        if inflated and len(cells) > header_count:
            eff_name = physical_index(header_count, len(cells), name_idx, info_columns)
            eff_value = physical_index(
                header_count, len(cells), value_idx, info_columns, sub_column=APPS_SUB_COLUMN
            )
        else:
            eff_name = physical_index(header_count, len(cells), name_idx)
            eff_value = physical_index(header_count, len(cells), value_idx)
        if eff_name is None:
            continue
        name = _entity_name(cells[eff_name])
        if len(name) < 2:
            continue
        value = html_utils.extract_int(cells[eff_value].text) if eff_value is not None else None
        if value is None:
            # Row-spanned goals cell: tied scorers share the previous value
            value = last_value
        else:
            last_value = value
        if value is not None and value > 0:
            located.append(LocatedRow(name, value, start + offset))
    return located


def _sum_odd_cells(cells: Sequence[Cell], info_columns: int) -> int:
    total = 0
    for ci in range(info_columns + 1, len(cells), 2):
        value = html_utils.extract_int(cells[ci].text)
        if value is not None:
            total += value
    return total


def locate_squad_goals(table: ClassifiedTable) -> List[LocatedRow]:
    """Goals per player from an Apps|Goals squad table.

    Uses the goals sub-column of the Total header. When that cannot be read,
    sums every odd cell after the information columns; that fallback may
    double count when a competition block breaks the two-cell pattern, so
    those rows are flagged ``best_effort``.
    """
    headers = table.headers
    name_idx = _require(find_name_column(headers), "Player/Name", table)
    total_idx = find_total_column(headers)
    info_columns = name_idx + 1
    header_count = len(headers)

    located: List[LocatedRow] = []
    for offset, cells in enumerate(table.data_rows):
        if len(cells) < MIN_SQUAD_ROW_CELLS or _is_aggregate_row(cells):
            continue
        name = _entity_name(cells[min(name_idx, len(cells) - 1)])
        if len(name) < 2:
            continue
        row_index = table.first_data_row + offset
        if total_idx >= 0:
            goals_cell = physical_index(
                header_count, len(cells), total_idx, info_columns, sub_column=GOALS_SUB_COLUMN
            )
            if goals_cell is not None:
                goals = html_utils.extract_int(cells[goals_cell].text)
                if goals is not None and goals > 0:
                    located.append(LocatedRow(name, goals, row_index))
                    continue
        summed = _sum_odd_cells(cells, info_columns)
        if summed > 0:
            located.append(LocatedRow(name, summed, row_index, best_effort=True))
    return located


def locate_rows(table: ClassifiedTable) -> List[LocatedRow]:
    """Located rows for any recognised shape; raises ParsingError otherwise."""
    if table.shape is TableShape.STANDINGS:
        return locate_standings(table)
    if table.shape is TableShape.RANKED_SCORER:
        return locate_ranked_scorers(table)
    if table.shape is TableShape.SQUAD_APPEARANCES:
        rows = locate_squad_goals(table)
        if not rows and find_total_column(table.headers) >= 0:
            # No Apps|Goals data after all: read the Total column as goals
            rows = locate_ranked_scorers(table)
        return rows
    raise UnrecognizedTableError(
        f"table {table.table.index} has no recognised shape",
        context={"headers": list(table.headers)},
    )
