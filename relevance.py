# relevance.py
"""
Relevance Resolver

Works out, from a snapshot of the page being augmented, which support-table
rows apply to it: rows linking to the page (or to its declaration header),
rows declaring one of the page's feature-test macros, and rows citing one of
the papers / defect reports listed on the page.
"""

import dataclasses
import logging
import re
from typing import Optional, Sequence, Set

from bs4 import BeautifulSoup, Tag

from config import LanguageProfile
from models import Cell, Criteria
from tabulator import tabulate
from utils import is_in_page_link, is_url_prefix, normalize_url

logger = logging.getLogger(__name__)

HEADER_LINK_SELECTOR = ".t-dcl-begin .t-dsc-header a"
FTM_VALUE_RE = re.compile(r"\b(\d{6})L\b")


# ---------- Criteria construction ----------

def build_criteria(page: BeautifulSoup, page_url: str, profile: LanguageProfile,
                   base_url: str = "") -> Criteria:
    """
    Compute the immutable Criteria for `page`, located at `page_url`.
    `base_url` resolves the links of remote support tables (defaults to the
    page URL itself).
    """
    base = base_url or page_url
    header = page.select_one(HEADER_LINK_SELECTOR)
    header_link = None
    if header is not None and header.get("href"):
        header_link = normalize_url(header["href"], page_url)
    else:
        logger.debug("no declaration header on %s; header link criterion skipped", page_url)

    anchors = collect_ftm_anchors(page, profile)
    papers = collect_dr_papers(page, profile)
    logger.debug("criteria for %s: header=%s anchors=%s papers=%s",
                 page_url, header_link, sorted(anchors), sorted(papers))
    return Criteria(
        page_url=normalize_url(page_url),
        base_url=base,
        header_link=header_link,
        anchors=frozenset(anchors),
        papers=frozenset(papers),
    )


def ftm_token(macro: str, value: str, defining_prefix: str) -> str:
    """('__cpp_lib_optional', '201606L') -> 'lib_optional_201606L'"""
    name = macro[len(defining_prefix):] if macro.startswith(defining_prefix) else macro
    return f"{name}_{value}"


def collect_ftm_anchors(page: BeautifulSoup, profile: LanguageProfile) -> Set[str]:
    macro_re = re.compile(rf"\b{profile.ftm_macro_pattern}")
    anchors: Set[str] = set()
    for table in page.select(profile.ftm_table_selector):
        for row in tabulate(table):
            macro = value = None
            for cell in row:
                if cell is None:
                    continue
                text = cell.text()
                if macro is None:
                    m = macro_re.search(text)
                    if m:
                        macro = m.group(0)
                        # the value may sit in the same cell
                        text = text[m.end():]
                if value is None:
                    v = FTM_VALUE_RE.search(text)
                    if v:
                        value = v.group(0)
            if macro and value:
                anchors.add(ftm_token(macro, value, profile.ftm_defining_prefix))
    return anchors


def _is_dr_table(table: Tag) -> bool:
    grid = tabulate(table)
    if not grid or not grid[0] or grid[0][0] is None:
        return False
    return grid[0][0].text().upper() == "DR"


def collect_dr_papers(page: BeautifulSoup, profile: LanguageProfile) -> Set[str]:
    papers: Set[str] = set()
    for table in page.select(profile.dr_table_selector):
        if not _is_dr_table(table):
            continue
        for row in tabulate(table)[1:]:
            for cell in row:
                if cell is not None:
                    papers |= cell.papers()
    return papers


def expand_papers(criteria: Criteria, index_page: Optional[BeautifulSoup]) -> Criteria:
    """
    Widen the paper set through a cross-reference page whose table rows relate
    defect reports to the papers that resolved them. Any row citing a known
    paper contributes every paper it cites.
    """
    if index_page is None or not criteria.papers:
        return criteria
    papers = set(criteria.papers)
    for table in index_page.find_all("table"):
        for row in tabulate(table):
            cited = _row_papers(row)
            if cited & criteria.papers:
                papers |= cited
    added = papers - criteria.papers
    if added:
        logger.info("paper cross-reference added %s", sorted(added))
    return dataclasses.replace(criteria, papers=frozenset(papers))


# ---------- Relevance test ----------

def _row_papers(row: Sequence[Optional[Cell]]) -> Set[str]:
    out: Set[str] = set()
    for cell in row:
        if cell is not None:
            out |= cell.papers()
    return out


def is_relevant(row: Sequence[Optional[Cell]], criteria: Criteria) -> bool:
    cells = [c for c in row if c is not None]
    # footnote and edit links resolve to whatever page hosts the table
    links = [normalize_url(href, criteria.base_url)
             for c in cells for href in c.links() if not is_in_page_link(href)]
    if any(is_url_prefix(link, criteria.page_url) for link in links):
        return True
    if criteria.header_link and criteria.header_link in links:
        return True
    if criteria.anchors and any(c.ids() & criteria.anchors for c in cells):
        return True
    if criteria.papers and _row_papers(cells) & criteria.papers:
        return True
    return False
