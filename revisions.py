# revisions.py
"""
Revision Range Selector

Decides which standard revisions (and so which compiler support pages) are
in scope for a page, from the "since C++NN" / "until C++NN" markers on its
title or declarations.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from config import LanguageProfile
from models import RevisionMarkers
from utils import revision_year

logger = logging.getLogger(__name__)

TITLE_SELECTOR = "#firstHeading"
MARK_SELECTOR = ".t-mark-rev"
DCL_BLOCK_SELECTOR = ".t-dcl-begin"
DCL_ELEMENT_SELECTOR = ".t-dcl-rev, .t-dcl"


def _classes(tag: Tag) -> List[str]:
    value = tag.get("class") or []
    return value.split() if isinstance(value, str) else list(value)


def markers_from_classes(classes: Iterable[str], prefix: str) -> RevisionMarkers:
    """['t-since-cxx11', 't-until-cxx20'] -> RevisionMarkers('11', '20')"""
    pattern = re.compile(rf"^t-(since|until)-{re.escape(prefix)}(\d+)$")
    found = {}
    for cls in classes:
        m = pattern.match(cls)
        if m:
            found.setdefault(m.group(1), m.group(2))
    return RevisionMarkers(since=found.get("since"), until=found.get("until"))


def _element_markers(tag: Tag, prefix: str) -> RevisionMarkers:
    classes = _classes(tag)
    for child in tag.find_all(class_=True):
        classes.extend(_classes(child))
    return markers_from_classes(classes, prefix)


def _top_level_blocks(page: BeautifulSoup) -> List[Tag]:
    """Declaration blocks, minus the ones nested in member listings."""
    blocks = []
    for block in page.select(DCL_BLOCK_SELECTOR):
        nested = any(
            "t-dcl-begin" in _classes(parent) or "t-dsc-begin" in _classes(parent)
            for parent in block.find_parents(class_=True)
        )
        if not nested:
            blocks.append(block)
    return blocks


def discover_markers(page: BeautifulSoup, profile: LanguageProfile) -> List[RevisionMarkers]:
    title = page.select_one(TITLE_SELECTOR)
    if title is not None:
        marks = title.select(MARK_SELECTOR)
        if len(marks) == 1:
            return [_element_markers(marks[0], profile.marker_prefix)]

    markers = []
    for block in _top_level_blocks(page):
        for element in block.select(DCL_ELEMENT_SELECTOR):
            markers.append(_element_markers(element, profile.marker_prefix))
    return markers


def _since_index(catalog: Sequence[str], token: Optional[str]) -> int:
    if token is None:
        return 0
    year = revision_year(token)
    for idx, rev in enumerate(catalog):
        if revision_year(rev) >= year:
            return idx
    return len(catalog)


def _until_index(catalog: Sequence[str], token: Optional[str]) -> int:
    if token is None:
        return len(catalog) - 1
    year = revision_year(token)
    for idx in range(len(catalog) - 1, -1, -1):
        if revision_year(catalog[idx]) <= year:
            return idx
    return -1


def select_revisions(catalog: Sequence[str], markers: Sequence[RevisionMarkers]) -> List[str]:
    """
    Union of the ranges described by `markers`, as a slice of `catalog`.

    Each marker set defaults its missing bound to the catalog edge before
    the min/max is taken, so a since-only set and an until-only set together
    select the whole catalog.
    """
    if not markers:
        return list(catalog)
    since = min(_since_index(catalog, m.since) for m in markers)
    until = max(_until_index(catalog, m.until) for m in markers)
    selected = list(catalog[since:until + 1])
    logger.debug("revision markers %s -> %s", markers, selected)
    return selected
