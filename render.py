# render.py
"""
Turn merged TableSections back into markup and attach them to the page.
"""

import copy
import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from config import DEFAULTS, LanguageProfile, RenderConfig
from models import Cell, SupportReport, TableSection

logger = logging.getLogger(__name__)

NA_STYLE = "background: #ececec; color: grey; vertical-align: middle; text-align: center;"

_LANG_LABEL = {"cpp": "C++", "c": "C"}


def _cell_tag(soup: BeautifulSoup, cell: Cell, rowspan: int, colspan: int) -> Tag:
    tag = copy.copy(cell.tag)
    for attr in ("rowspan", "colspan"):
        if attr in tag.attrs:
            del tag[attr]
    if rowspan > 1:
        tag["rowspan"] = str(rowspan)
    if colspan > 1:
        tag["colspan"] = str(colspan)
    if cell.placeholder:
        tag["style"] = NA_STYLE
    return tag


def _rows_to_tags(soup: BeautifulSoup, rows: List[List[Cell]]) -> List[Tag]:
    """
    Emit one <tr> per row, collapsing runs of the same Cell object back into
    rowspan/colspan.
    """
    out = []
    for r, row in enumerate(rows):
        tr = soup.new_tag("tr")
        for c, cell in enumerate(row):
            if c > 0 and row[c - 1] is cell:
                continue
            if r > 0 and c < len(rows[r - 1]) and rows[r - 1][c] is cell:
                continue
            colspan = 1
            while c + colspan < len(row) and row[c + colspan] is cell:
                colspan += 1
            rowspan = 1
            while (r + rowspan < len(rows) and c < len(rows[r + rowspan])
                   and rows[r + rowspan][c] is cell):
                rowspan += 1
            tr.append(_cell_tag(soup, cell, rowspan, colspan))
        out.append(tr)
    return out


def render_section(section: TableSection, soup: Optional[BeautifulSoup] = None) -> Tag:
    soup = soup or BeautifulSoup("", "html.parser")
    table = soup.new_tag("table")
    table["class"] = ["wikitable", "support-info-table"]
    table["style"] = "font-size: 0.8em;"
    tbody = soup.new_tag("tbody")
    table.append(tbody)
    if section.is_empty():
        return table

    head = list(section.head)
    # the label column reads "C++20 feature" etc. on the source pages
    label = soup.new_tag(head[0].tag.name or "th")
    label.string = "Feature"
    head[0] = Cell(label)
    for tr in _rows_to_tags(soup, [head] + section.body):
        tbody.append(tr)
    return table


def build_fragment(report: SupportReport, profile: LanguageProfile,
                   cfg: Optional[RenderConfig] = None,
                   soup: Optional[BeautifulSoup] = None) -> Optional[Tag]:
    """Heading, note and tables, or None when there is nothing to show."""
    cfg = cfg or DEFAULTS.render
    if not report.has_content():
        return None
    soup = soup or BeautifulSoup("", "html.parser")

    div = soup.new_tag("div")
    div["class"] = ["support-info"]
    heading = soup.new_tag("h3")
    heading.string = cfg.heading
    div.append(heading)

    lang = _LANG_LABEL.get(profile.name, profile.name)
    revs = ", ".join(f"{lang}{rev}" for rev in report.revisions)
    note = soup.new_tag("p")
    note.string = (f"The tables below are generated from the {lang} compiler support pages "
                   f"({revs}) and may be incomplete.")
    div.append(note)

    for section in (report.compiler, report.library):
        if section.body:
            div.append(render_section(section, soup))
    return div


def inject(page: BeautifulSoup, fragment: Tag, selector: Optional[str] = None) -> bool:
    """Append `fragment` to the page content element. False if it is absent."""
    selector = selector or DEFAULTS.render.content_selector
    target = page.select_one(selector)
    if target is None:
        logger.warning("%s not found; page left unchanged", selector)
        return False
    target.append(fragment)
    return True
