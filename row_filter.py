# row_filter.py
"""
Row Filter: pull the relevant rows out of one support table.
"""

import logging
from typing import List, Optional

from bs4 import BeautifulSoup

from models import Cell, Criteria, Row, TableSection
from relevance import is_relevant
from tabulator import tabulate

logger = logging.getLogger(__name__)


def _fit(row: List[Optional[Cell]], width: int) -> Row:
    """Fill gaps with placeholders and pad/truncate to `width` columns."""
    out = [c if c is not None else Cell.make_placeholder("") for c in row[:width]]
    while len(out) < width:
        out.append(Cell.make_placeholder(""))
    return out


def filter_rows(content: BeautifulSoup, selector: str, criteria: Criteria) -> TableSection:
    """
    Locate the support table matching `selector`, drop its header and footer
    rows and keep the relevant rows. An empty TableSection means the page has
    nothing to contribute.
    """
    table = content.select_one(selector)
    if table is not None and table.name != "table":
        table = table.find("table")
    if table is None:
        logger.debug("no table matches %s", selector)
        return TableSection()

    grid = tabulate(table)
    if not grid:
        return TableSection()

    head = _fit(grid[0], len(grid[0]))
    body = [_fit(row, len(head)) for row in grid[1:-1] if is_relevant(row, criteria)]
    logger.debug("%s: %d of %d rows relevant", selector, len(body), max(len(grid) - 2, 0))
    return TableSection(head=head, body=body)
