# tabulator.py
"""
Flatten an HTML table with row/column spans into a dense grid.
"""

from typing import Dict, List, Optional, Tuple

from bs4 import Tag

from models import Cell, Grid


def _own_rows(table: Tag) -> List[Tag]:
    """<tr> elements of `table` itself, skipping rows of nested tables."""
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def tabulate(table: Optional[Tag]) -> Grid:
    """
    Expand `table` into a grid where a spanned cell appears, as the same
    Cell object, at every (row, column) it covers.

    Positions no cell claims are left as None; rows may differ in length
    when spans are malformed.
    """
    if table is None:
        return []

    rows = _own_rows(table)
    grid: Grid = [[] for _ in rows]
    # (row, col) -> cell, for positions claimed by spans from earlier rows
    claimed: Dict[Tuple[int, int], Cell] = {}

    for r, tr in enumerate(rows):
        line = grid[r]
        col = 0
        for td in tr.find_all(["td", "th"], recursive=False):
            # skip columns already filled by a vertical span
            while (r, col) in claimed:
                col += 1
            cell = Cell(td)
            for dr in range(cell.rowspan):
                for dc in range(cell.colspan):
                    claimed[(r + dr, col + dc)] = cell
            col += cell.colspan

        width = max((c + 1 for (rr, c) in claimed if rr == r), default=0)
        for c in range(width):
            line.append(claimed.get((r, c)))

    return grid
